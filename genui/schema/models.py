"""Request models shared by the generator, evaluator and UI."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .lib import Density, Intent, Persona


class TaskGoal(BaseModel):
    """What the user wants to do."""

    model_config = ConfigDict(use_enum_values=True)

    description: str = Field(..., min_length=1, description="Free-text task goal")
    intent: Intent = Field(Intent.WRITE, description="Task intent category")


class Preferences(BaseModel):
    """Display preferences carried by a user profile."""

    model_config = ConfigDict(
        use_enum_values=True, alias_generator=to_camel, populate_by_name=True
    )

    density: Density = Density.COMFORTABLE
    show_minimap: bool = True


class UserProfile(BaseModel):
    """The user a workspace is generated for."""

    model_config = ConfigDict(use_enum_values=True)

    id: str = "u1"
    name: str = "User"
    persona: Persona = Persona.VISUAL
    preferences: Preferences = Field(default_factory=Preferences)


__all__ = ["TaskGoal", "Preferences", "UserProfile"]
