"""
Linked athlete.
"""

from dataclasses import dataclass


@dataclass
class User:
    """
    Row of the metadata sheet.

    display_name is the lookup key and also the title of the athlete's
    activity sheet. It is used verbatim: characters Google Sheets does not
    allow in a sheet title make sheet creation fail.
    """

    display_name: str
    external_id: str
    refresh_token: str

    @classmethod
    def from_row(cls, row: list) -> "User":
        cells = [str(cell) for cell in row] + [""] * (3 - len(row))
        return cls(display_name=cells[0], external_id=cells[1], refresh_token=cells[2])

    def to_row(self) -> list[str]:
        return [self.display_name, self.external_id, self.refresh_token]
