"""User registration and login backed by a plain text file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

MAX_FIELD_LENGTH = 29
DEFAULT_USER_FILE = "user.txt"


class LoginResult(Enum):
    REGISTERED = "registered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class UserStore:
    """Whitespace-separated "user password" lines in a text file."""

    def __init__(self, path=DEFAULT_USER_FILE):
        self.path = Path(path)

    def _tokens(self) -> list[str] | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return text.split()

    def login(self, username, password) -> LoginResult:
        """Check the credentials; the first user ever is registered.

        Raises OSError when the file cannot be written for registration.
        """
        tokens = self._tokens()
        if tokens:
            stored_password = ""
            for start in range(0, len(tokens), 2):
                stored_user = tokens[start]
                if start + 1 < len(tokens):
                    stored_password = tokens[start + 1]
                if username == stored_user and password == stored_password:
                    return LoginResult.ACCEPTED
            return LoginResult.REJECTED

        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(f"{username} {password}\n")
        return LoginResult.REGISTERED


@dataclass
class LoginForm:
    """Text entered into the username and password fields."""

    username: str = ""
    password: str = ""
    typing_username: bool = True

    def type_char(self, ch) -> bool:
        """Append a printable character to the active field."""
        if len(ch) != 1 or not (" " <= ch <= "~"):
            return False
        if self.typing_username:
            if len(self.username) >= MAX_FIELD_LENGTH:
                return False
            self.username += ch
        else:
            if len(self.password) >= MAX_FIELD_LENGTH:
                return False
            self.password += ch
        return True

    def backspace(self) -> None:
        if self.typing_username:
            self.username = self.username[:-1]
        else:
            self.password = self.password[:-1]

    def toggle_field(self) -> None:
        self.typing_username = not self.typing_username

    def clear(self) -> None:
        """Empty both fields, keeping the active one."""
        self.username = ""
        self.password = ""

    def masked_password(self) -> str:
        return "*" * len(self.password)