"""Board colour themes (256-colour palette indexes) and the display settings that pick one"""

from dataclasses import dataclass

from pydantic import BaseModel, field_validator

from netchess.core.exceptions import InvalidConfigError

# Terminal "default colour" marker, same convention as curses' -1
DEFAULT_COLOR = -1


@dataclass(frozen=True)
class Theme:
    name: str
    light: int
    dark: int
    selected: int
    legal: int
    cursor: int
    white_piece: int
    black_piece: int


THEMES: tuple[Theme, ...] = (
    Theme("walnut", light=223, dark=173, selected=68, legal=155, cursor=196, white_piece=231, black_piece=16),
    Theme("marine", light=153, dark=67, selected=214, legal=120, cursor=196, white_piece=231, black_piece=16),
    Theme("forest", light=187, dark=65, selected=75, legal=228, cursor=160, white_piece=231, black_piece=16),
    Theme("mono", light=250, dark=240, selected=33, legal=114, cursor=196, white_piece=231, black_piece=16),
)


class DisplayConfig(BaseModel):
    """Cosmetic settings. Changing them never touches the game state."""

    theme_index: int = 0

    @field_validator("theme_index")
    @classmethod
    def validate_theme_index(cls, value: int) -> int:
        if not 0 <= value < len(THEMES):
            raise InvalidConfigError(
                f"Theme index {value} out of range. Pick one from 0-{len(THEMES) - 1} ({', '.join(t.name for t in THEMES)})."
            )
        return value

    @property
    def theme(self) -> Theme:
        return THEMES[self.theme_index]

    def cycle_theme(self) -> Theme:
        """Switch to the next theme (wrapping around) and return it"""
        self.theme_index = (self.theme_index + 1) % len(THEMES)
        return self.theme
