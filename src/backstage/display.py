"""Display tables for the closed enumerations on project sub-entities.

Each table is keyed by its enum and covers every member, so a new member
without an entry fails at import time instead of rendering blank.
"""

from dataclasses import dataclass

from backstage.models import ContributorRole, FileType, TaskPriority


@dataclass(frozen=True)
class Badge:
    """A label with its color tokens."""

    label: str
    color: str
    light_bg: str


PRIORITY_DISPLAY: dict[TaskPriority, Badge] = {
    TaskPriority.LOW: Badge("낮음", "green-700", "green-100"),
    TaskPriority.MEDIUM: Badge("중간", "yellow-700", "yellow-100"),
    TaskPriority.HIGH: Badge("높음", "red-700", "red-100"),
}

ROLE_DISPLAY: dict[ContributorRole, Badge] = {
    ContributorRole.PRODUCER: Badge("Producer", "purple-700", "purple-100"),
    ContributorRole.COMPOSER: Badge("Composer", "green-700", "green-100"),
    ContributorRole.VOCALIST: Badge("Vocalist", "pink-700", "pink-100"),
    ContributorRole.MIXING_ENGINEER: Badge("Mixing Engineer", "yellow-700", "yellow-100"),
    ContributorRole.MASTERING_ENGINEER: Badge("Mastering Engineer", "blue-700", "blue-100"),
    ContributorRole.OTHER: Badge("Other", "gray-600", "gray-100"),
}


@dataclass(frozen=True)
class FileKind:
    """How a file type is presented."""

    label: str
    icon: str
    playable: bool


FILE_KIND_DISPLAY: dict[FileType, FileKind] = {
    FileType.AUDIO: FileKind("Audio", "🎵", True),
    FileType.OTHER: FileKind("File", "📄", False),
}


def _check_exhaustive() -> None:
    for enum_cls, table in (
        (TaskPriority, PRIORITY_DISPLAY),
        (ContributorRole, ROLE_DISPLAY),
        (FileType, FILE_KIND_DISPLAY),
    ):
        missing = set(enum_cls) - set(table)
        if missing:
            raise RuntimeError(f"{enum_cls.__name__} display table missing: {sorted(m.value for m in missing)}")


_check_exhaustive()


def priority_badge(priority: TaskPriority) -> Badge:
    return PRIORITY_DISPLAY[TaskPriority(priority)]


def role_badge(role: ContributorRole) -> Badge:
    return ROLE_DISPLAY[ContributorRole(role)]


def file_kind(file_type: FileType) -> FileKind:
    return FILE_KIND_DISPLAY[FileType(file_type)]
