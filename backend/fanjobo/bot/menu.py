"""Plain menu commands.

Runs only for events no wizard handled. Tokens are already normalized, so
decorated and localized labels arrive here as canonical tokens. Listings
(university sections, industry opportunities, roadmaps) are read through
the ContentCatalog.
"""

from collections.abc import Sequence
from typing import Any

from fanjobo.wizards.collaborators import ContentCatalog
from fanjobo.wizards.context import ActorContextLoader
from fanjobo.wizards.keyboards import (
    MAIN_MENU_KEYBOARD,
    PATH_MENU_KEYBOARD,
    UNIVERSITY_MENU_KEYBOARD,
)
from fanjobo.wizards.normalizer import (
    HELP,
    INDUSTRY,
    MAIN_MENU,
    MY_PATH,
    PROFILE_COMMAND,
    START,
    SUBMIT_COMMAND,
    UNIVERSITY,
    UNIVERSITY_BOOKS,
    UNIVERSITY_COURSES,
    UNIVERSITY_EXAM_TIPS,
    UNIVERSITY_NOTES,
    UNIVERSITY_PROFESSORS,
    UNIVERSITY_RESOURCES,
)
from fanjobo.wizards.state import DocumentEvent, Reply, WizardEvent

UNIVERSITY_LIST_LIMIT = 7
INDUSTRY_LIST_LIMIT = 5
ROADMAP_LIST_LIMIT = 3

# Section token -> contents.kind
UNIVERSITY_SECTIONS: dict[str, str] = {
    UNIVERSITY_COURSES: "course",
    UNIVERSITY_PROFESSORS: "professor",
    UNIVERSITY_NOTES: "note",
    UNIVERSITY_BOOKS: "book",
    UNIVERSITY_RESOURCES: "resource",
    UNIVERSITY_EXAM_TIPS: "exam-tip",
}

WEEKLY_PLAN = (
    "- 2h study",
    "- 2h project",
    "- 1h review",
    "- 1h job-market prep",
)

WELCOME_MESSAGE = "Welcome to Fanjobo.\nThe main menu is ready."
HELP_MESSAGE = (
    f"{PROFILE_COMMAND}: fill in your academic profile step by step.\n"
    f"{UNIVERSITY}: courses, professors, notes and more for your track.\n"
    f"{INDUSTRY}: the latest industry opportunities.\n"
    f"{SUBMIT_COMMAND}: send university content (PDF) for moderation.\n"
    f"{MY_PATH}: your plan, plus goals, tasks and artifacts.\n"
    "During any form, send Skip for optional questions or Cancel to stop."
)
BACK_MESSAGE = "Back to the main menu."
PROFILE_FIRST_MESSAGE = f"Complete your profile first ({PROFILE_COMMAND})."
UNIVERSITY_MESSAGE = "University module\nTrack: {track}\nChoose a section:"
EMPTY_LIST_MESSAGE = "Nothing is listed yet."
INDUSTRY_HEADER = "Industry opportunities:"
NO_INDUSTRY_MESSAGE = "No industry opportunities are listed yet."
NO_ROADMAP_MESSAGE = "No roadmap is listed for your track yet."
DOCUMENT_HINT = f"To send a file, start {SUBMIT_COMMAND} first."
FALLBACK_MESSAGE = "Please choose an option from the menu."


def format_track(major: str, term: str | None) -> str:
    """Major with the term appended when known."""
    return f"{major} | Term: {term}" if term else major


def format_titles(items: Sequence[dict[str, Any]], *, with_kind: bool = False) -> str:
    """Numbered list of item titles, one per line."""
    lines = []
    for index, item in enumerate(items, start=1):
        prefix = f"[{item['kind']}] " if with_kind else ""
        lines.append(f"{index}. {prefix}{item['title']}")
    return "\n".join(lines)


class MenuDispatcher:
    """Answers menu tokens outside of wizards."""

    def __init__(self, context_loader: ActorContextLoader, contents: ContentCatalog) -> None:
        """Initialize the menu.

        Args:
            context_loader: Resolves actors to users and profiles.
            contents: Published content listings.
        """
        self._context_loader = context_loader
        self._contents = contents

    async def handle(
        self,
        actor_id: str,
        event: WizardEvent,
        *,
        display_name: str | None = None,
    ) -> Reply:
        """Reply to a menu token (or anything else) for an idle actor.

        Args:
            actor_id: Conversing user.
            event: Normalized text event, or a document event.
            display_name: Name reported by the transport.

        Returns:
            The reply to send.
        """
        if isinstance(event, DocumentEvent):
            return Reply(DOCUMENT_HINT, MAIN_MENU_KEYBOARD)

        text = event.text
        if text in ("", START):
            await self._context_loader.ensure_user(actor_id, display_name)
            return Reply(WELCOME_MESSAGE, MAIN_MENU_KEYBOARD)
        if text == HELP:
            return Reply(HELP_MESSAGE, MAIN_MENU_KEYBOARD)
        if text == MAIN_MENU:
            return Reply(BACK_MESSAGE, MAIN_MENU_KEYBOARD)
        if text == MY_PATH:
            return await self._my_path(actor_id, display_name)
        if text == UNIVERSITY:
            return await self._university(actor_id, display_name)
        if text in UNIVERSITY_SECTIONS:
            return await self._university_section(text, actor_id, display_name)
        if text == INDUSTRY:
            return await self._industry()
        return Reply(FALLBACK_MESSAGE, MAIN_MENU_KEYBOARD)

    async def _university(self, actor_id: str, display_name: str | None) -> Reply:
        context = await self._context_loader.load(actor_id, display_name)
        if not context.get("profile_complete"):
            return Reply(PROFILE_FIRST_MESSAGE, MAIN_MENU_KEYBOARD)
        track = format_track(context["major"], context.get("term"))
        return Reply(UNIVERSITY_MESSAGE.format(track=track), UNIVERSITY_MENU_KEYBOARD)

    async def _university_section(
        self, section: str, actor_id: str, display_name: str | None
    ) -> Reply:
        context = await self._context_loader.load(actor_id, display_name)
        if not context.get("profile_complete"):
            return Reply(PROFILE_FIRST_MESSAGE, MAIN_MENU_KEYBOARD)

        items = await self._contents.list_university(
            UNIVERSITY_SECTIONS[section],
            context["major"],
            context.get("term"),
            UNIVERSITY_LIST_LIMIT,
        )
        header = f"{section}\nTrack: {format_track(context['major'], context.get('term'))}"
        body = format_titles(items) or EMPTY_LIST_MESSAGE
        return Reply(f"{header}\n\n{body}", UNIVERSITY_MENU_KEYBOARD)

    async def _industry(self) -> Reply:
        items = await self._contents.list_industry(INDUSTRY_LIST_LIMIT)
        if not items:
            return Reply(NO_INDUSTRY_MESSAGE, MAIN_MENU_KEYBOARD)
        return Reply(
            f"{INDUSTRY_HEADER}\n{format_titles(items, with_kind=True)}",
            MAIN_MENU_KEYBOARD,
        )

    async def _my_path(self, actor_id: str, display_name: str | None) -> Reply:
        # Path wizards stay reachable from here even without a profile
        profile = await self._context_loader.load_profile(actor_id, display_name)
        if profile is None:
            return Reply(PROFILE_FIRST_MESSAGE, PATH_MENU_KEYBOARD)

        roadmaps = await self._contents.list_roadmaps(profile.get("major"), ROADMAP_LIST_LIMIT)
        text = "\n".join(
            [
                "Your path",
                f"Goal: {profile.get('short_term_goal') or '-'}",
                f"Free hours per week: {profile.get('weekly_hours') or '-'}",
                "",
                "Roadmaps:",
                format_titles(roadmaps) or NO_ROADMAP_MESSAGE,
                "",
                "Weekly plan:",
                *WEEKLY_PLAN,
            ]
        )
        return Reply(text, PATH_MENU_KEYBOARD)
