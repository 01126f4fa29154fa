from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel

DEFAULT_LOCATION = "There’s a farmhouse still standing in the hills of eastern Kentucky"

LANGUAGES = ["English", "Indonesian"]

# Adapted to the eastern Kentucky farmhouse; the first entry is the default.
CATALYST_OPTIONS = [
    "A charismatic leader named Eldon convinced the twelve families that the apocalypse had occurred in 1812, and the outside world was nothing but ash and demons.",
    "The matriarch believed her bloodline carried a divine curse that could only be purified by marrying within the family to concentrate the 'holy' struggle.",
    "They believed the air outside the valley was slowly turning poisonous, and only the specific flora of their land provided breathable oxygen.",
    "A traveling preacher convinced them that human speech was a sin, and isolation was the only way to hear the 'True Frequency' of the universe.",
    "After a solar flare in the 19th century, they believed the sun had become a hostile entity that would incinerate the unfaithful, forcing them to live nocturnally.",
    "They discovered a parasitic organism in the deep soil that granted long life but demanded the consumption of raw flesh.",
    "A soldier returning from the Civil War convinced them that the government had been replaced by 'clockwork men', and only this farm remained pure.",
    "They found a book in the cellar that predicted the exact date of everyone's death, but only if they remained within the property lines.",
]


class GenerationStatus(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    ERROR = "error"


class CaseParameters(BaseModel):
    location: str = DEFAULT_LOCATION
    era: str = ""
    language: Literal["English", "Indonesian"] = "English"
    catalyst: str = CATALYST_OPTIONS[0]

    def missing_fields(self) -> List[str]:
        return [name for name, value in self.model_dump().items() if not str(value).strip()]


class FieldUpdate(BaseModel):
    field: str
    value: str


class Section(BaseModel):
    index: int
    title: str
    file_label: str
    text: str
    cursor: bool = False


class RenderedStory(BaseModel):
    status: GenerationStatus
    sections: List[Section]
    placeholder: Optional[str] = None
    receiving: bool = False
    pin_to_bottom: bool = False
    html: str = ""


class CaseResponse(BaseModel):
    parameters: CaseParameters
    story: RenderedStory


class OptionsResponse(BaseModel):
    location: str
    languages: List[str]
    catalysts: List[str]
    section_marker: str
    section_titles: List[str]
    placeholder: str
