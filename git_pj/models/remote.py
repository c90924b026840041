"""Remote identity model and related enums"""
from dataclasses import dataclass
from enum import Enum


class GitProtocol(Enum):
    """Transport a remote URI was written with."""
    SSH = "ssh"
    HTTP = "https"


@dataclass(frozen=True)
class GitIdentity:
    """Structured identity of a git remote."""
    hostname: str
    user: str
    repo: str
    protocol: GitProtocol
    uri: str  # Original input, as typed

    @property
    def slug(self) -> str:
        return f"{self.hostname}/{self.user}/{self.repo}"

    def to_dict(self) -> dict:
        return {
            "hostname": self.hostname,
            "user": self.user,
            "repo": self.repo,
            "protocol": self.protocol.value,
            "uri": self.uri,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GitIdentity":
        return cls(
            hostname=data["hostname"],
            user=data["user"],
            repo=data["repo"],
            protocol=GitProtocol(data["protocol"]),
            uri=data["uri"],
        )
