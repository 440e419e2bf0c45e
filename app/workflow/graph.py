from langgraph.graph import StateGraph, END
from app.models.state import TutorialState
from app.workflow.nodes import (
    transcribe_video,
    extract_steps,
    build_tutorial,
)

def create_workflow():
    """Create and return the compiled tutorial workflow graph."""
    workflow = StateGraph(TutorialState)

    # Add nodes
    workflow.add_node("transcribe_video", transcribe_video)
    workflow.add_node("extract_steps", extract_steps)
    workflow.add_node("build_tutorial", build_tutorial)

    # Set entry point; any node that records an error ends the run
    workflow.set_entry_point("transcribe_video")
    workflow.add_conditional_edges(
        "transcribe_video",
        lambda state: END if state.get("error") else "extract_steps",
        {
            "extract_steps": "extract_steps",
            END: END
        }
    )
    workflow.add_conditional_edges(
        "extract_steps",
        lambda state: END if state.get("error") else "build_tutorial",
        {
            "build_tutorial": "build_tutorial",
            END: END
        }
    )
    workflow.add_edge("build_tutorial", END)

    return workflow.compile()

# Create the compiled workflow
workflow = create_workflow()
