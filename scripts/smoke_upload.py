import sys
import time
from pathlib import Path
import requests

BASE_URL = "http://localhost:8000"

def smoke_upload(video_path: str) -> int:
    # Check health endpoint first
    health_response = requests.get(f"{BASE_URL}/api/health")
    print("Health check response:", health_response.json())

    # Upload the recording
    path = Path(video_path)
    print(f"Uploading {path.name}...")
    with open(path, "rb") as f:
        upload_response = requests.post(
            f"{BASE_URL}/api/upload",
            files={"video": (path.name, f, "video/mp4")},
        )
    upload_info = upload_response.json()
    print("Upload response:", upload_info)

    job_id = upload_info.get("jobId")
    if not job_id:
        print("No jobId received. Check the API logs for errors.")
        return 1

    # Now poll the job status until it's completed or failed
    status_url = f"{BASE_URL}/api/job/{job_id}"
    while True:
        status = requests.get(status_url).json()
        print("Job status:", status["status"])
        if status.get("status") in ["completed", "failed"]:
            break
        time.sleep(2)  # wait for 2 seconds between polls

    if status["status"] == "failed":
        print("Generation failed:", status.get("error"))
        return 1

    print(f"\n{status.get('templateTitle')} - {status['totalSteps']} steps")
    for step in status["steps"]:
        print(f"  {step['timestamp']}  {step['id']}. {step['text']}")
    print("\nVideo:", status["directVideoUrl"])
    return 0

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/smoke_upload.py <video_file>")
        sys.exit(1)
    sys.exit(smoke_upload(sys.argv[1]))
