"""
Templates package for tutorial generation.

This package contains:
1. The catalog of tutorial templates used by the simulated generator
2. Prompt texts (templates/prompts/) used by the OpenAI-backed generator
"""

from pathlib import Path
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict

TEMPLATES_DIR = Path(__file__).parent
PROMPTS_DIR = TEMPLATES_DIR / "prompts"

class TutorialTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: str
    description: str
    steps: Tuple[str, ...]

TUTORIAL_TEMPLATES: Tuple[TutorialTemplate, ...] = (
    TutorialTemplate(
        id="browser_setup",
        title="Browser Dark Mode Setup",
        category="UI Customization",
        description="Learn how to enable dark mode in your web browser",
        steps=(
            "Open your web browser (Chrome, Firefox, Edge, etc.)",
            "Click the three-dot menu icon in the top-right corner",
            "Select 'Settings' from the dropdown menu",
            "Navigate to 'Appearance' or 'Themes' section",
            "Find the 'Dark mode' toggle switch",
            "Enable dark mode by toggling the switch",
            "Close settings and refresh your tabs",
            "Enjoy the new dark theme interface",
        ),
    ),
    TutorialTemplate(
        id="file_organization",
        title="File Organization System",
        category="Productivity",
        description="Create an efficient file organization system",
        steps=(
            "Open File Explorer from your taskbar",
            "Navigate to your Documents folder",
            "Create a new folder named 'Sorted_Projects'",
            "Inside, create subfolders: 'Work', 'Personal', 'Archive'",
            "Select multiple files by holding Ctrl key",
            "Drag and drop files into appropriate folders",
            "Use descriptive names for easy searching",
            "Right-click main folder and 'Pin to Quick Access'",
        ),
    ),
    TutorialTemplate(
        id="software_install",
        title="Software Installation Guide",
        category="Setup",
        description="Step-by-step software installation process",
        steps=(
            "Visit the official website of the software",
            "Click the 'Download' button for your OS",
            "Run the downloaded installer file",
            "Accept the license agreement terms",
            "Choose installation directory location",
            "Select additional components if needed",
            "Click 'Install' and wait for completion",
            "Launch the software from Start Menu",
        ),
    ),
)

def list_templates() -> List[TutorialTemplate]:
    return list(TUTORIAL_TEMPLATES)

def get_template(template_id: str) -> TutorialTemplate:
    """Look up a catalog template by id."""
    for template in TUTORIAL_TEMPLATES:
        if template.id == template_id:
            return template
    raise ValueError(f"Template {template_id} not found in catalog")

def get_prompt(name: str) -> str:
    """Read a prompt text file."""
    path = PROMPTS_DIR / f"{name}.txt"
    try:
        return path.read_text()
    except FileNotFoundError:
        raise ValueError(f"Prompt {name}.txt not found in {PROMPTS_DIR}")
