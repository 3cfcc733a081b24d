"""Tests for the bot dispatcher and the plain menu."""

import pytest

from fanjobo.bot.dispatcher import BotDispatcher
from fanjobo.bot.menu import (
    BACK_MESSAGE,
    DOCUMENT_HINT,
    EMPTY_LIST_MESSAGE,
    FALLBACK_MESSAGE,
    HELP_MESSAGE,
    INDUSTRY_HEADER,
    NO_INDUSTRY_MESSAGE,
    NO_ROADMAP_MESSAGE,
    PROFILE_FIRST_MESSAGE,
    UNIVERSITY_SECTIONS,
    WEEKLY_PLAN,
    WELCOME_MESSAGE,
    MenuDispatcher,
)
from fanjobo.wizards.context import ActorContextLoader
from fanjobo.wizards.keyboards import (
    MAIN_MENU_KEYBOARD,
    PATH_MENU_KEYBOARD,
    UNIVERSITY_MENU_KEYBOARD,
)
from fanjobo.wizards.state import DocumentEvent, DocumentRef, TextEvent, WizardKind


@pytest.fixture
def menu(storage, contents) -> MenuDispatcher:
    return MenuDispatcher(ActorContextLoader(storage), contents)


@pytest.fixture
def dispatcher(controller, menu) -> BotDispatcher:
    return BotDispatcher(controller, menu)


class TestMenuDispatcher:
    """Tests for menu replies outside wizards."""

    @pytest.mark.asyncio
    async def test_start_registers_user(self, menu, storage):
        """Start greets and creates the user row."""
        reply = await menu.handle("42", TextEvent("Start"), display_name="Sara")

        assert reply.text == WELCOME_MESSAGE
        assert reply.keyboard == MAIN_MENU_KEYBOARD
        assert storage.rows("users")[0]["full_name"] == "Sara"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("Help", HELP_MESSAGE),
            ("Main menu", BACK_MESSAGE),
            ("what?", FALLBACK_MESSAGE),
        ],
    )
    async def test_static_replies(self, menu, token, expected):
        """Static menu tokens get their fixed reply."""
        reply = await menu.handle("42", TextEvent(token))
        assert reply.text == expected

    @pytest.mark.asyncio
    async def test_document_outside_wizard(self, menu):
        """A stray document gets a hint."""
        reply = await menu.handle("42", DocumentEvent(DocumentRef(file_id="f")))
        assert reply.text == DOCUMENT_HINT


class TestUniversityMenu:
    """Tests for the university module and its sections."""

    @pytest.mark.asyncio
    async def test_university_requires_profile(self, menu):
        """The university module asks for a profile first."""
        reply = await menu.handle("42", TextEvent("University"))

        assert reply.text == PROFILE_FIRST_MESSAGE
        assert reply.keyboard == MAIN_MENU_KEYBOARD

    @pytest.mark.asyncio
    async def test_university_shows_track_and_sections(self, menu, profiled_actor):
        """A profiled actor sees their track and the section keyboard."""
        reply = await menu.handle(profiled_actor, TextEvent("University"))

        assert "Track: Computer Engineering - Software | Term: 5" in reply.text
        assert reply.keyboard == UNIVERSITY_MENU_KEYBOARD

    @pytest.mark.asyncio
    async def test_section_lists_matching_items(self, menu, profiled_actor, contents):
        """A section lists the actor's items newest first, general items included."""
        contents.add("Data Structures", kind="course", major="Computer Engineering - Software")
        contents.add("Statics", kind="course", major="Civil Engineering")
        contents.add("Technical Writing", kind="course")
        contents.add("Term 7 only", kind="course", term="7")
        contents.add("Algorithms notes", kind="note")

        reply = await menu.handle(profiled_actor, TextEvent("University courses"))

        assert reply.text.startswith("University courses\nTrack: Computer Engineering")
        assert reply.text.endswith("1. Technical Writing\n2. Data Structures")
        assert reply.keyboard == UNIVERSITY_MENU_KEYBOARD
        assert contents.calls == [
            ("list_university", ("course", "Computer Engineering - Software", "5", 7))
        ]

    @pytest.mark.asyncio
    async def test_section_limit(self, menu, profiled_actor, contents):
        """At most seven items are listed."""
        for number in range(10):
            contents.add(f"Tip {number}", kind="exam-tip")

        reply = await menu.handle(profiled_actor, TextEvent("University exam tips"))

        assert "7. Tip 3" in reply.text
        assert "8." not in reply.text

    @pytest.mark.asyncio
    async def test_empty_section(self, menu, profiled_actor):
        """An empty section says so."""
        reply = await menu.handle(profiled_actor, TextEvent("University books"))
        assert reply.text.endswith(EMPTY_LIST_MESSAGE)

    @pytest.mark.asyncio
    async def test_section_requires_profile(self, menu, contents):
        """Sections are not queried without a major."""
        reply = await menu.handle("42", TextEvent("University notes"))

        assert reply.text == PROFILE_FIRST_MESSAGE
        assert contents.calls == []

    def test_every_section_is_on_the_keyboard(self):
        """Each section token has a button and a content kind."""
        buttons = {label for row in UNIVERSITY_MENU_KEYBOARD for label in row}
        assert set(UNIVERSITY_SECTIONS) <= buttons


class TestIndustryMenu:
    """Tests for industry listings."""

    @pytest.mark.asyncio
    async def test_no_opportunities(self, menu):
        """An empty listing gets the fixed reply."""
        reply = await menu.handle("42", TextEvent("Industry"))
        assert reply.text == NO_INDUSTRY_MESSAGE

    @pytest.mark.asyncio
    async def test_lists_kind_and_title(self, menu, contents):
        """Opportunities are listed with their kind, newest first."""
        contents.add("Backend intern", type="industry", kind="internship")
        contents.add("Data analyst", type="industry", kind="job")
        contents.add("Hidden", type="industry", kind="job", is_published=False)

        reply = await menu.handle("42", TextEvent("Industry"))

        assert reply.text == (
            f"{INDUSTRY_HEADER}\n1. [job] Data analyst\n2. [internship] Backend intern"
        )

    @pytest.mark.asyncio
    async def test_limit(self, menu, contents):
        """At most five opportunities are listed."""
        for number in range(8):
            contents.add(f"Job {number}", type="industry", kind="job")

        reply = await menu.handle("42", TextEvent("Industry"))

        assert contents.calls == [("list_industry", (5,))]
        assert "5. [job] Job 3" in reply.text
        assert "6." not in reply.text


class TestMyPathMenu:
    """Tests for the personal path overview."""

    @pytest.mark.asyncio
    async def test_requires_profile(self, menu):
        """Without a profile the actor is sent to the profile wizard."""
        reply = await menu.handle("42", TextEvent("My path"))

        assert reply.text == PROFILE_FIRST_MESSAGE
        assert reply.keyboard == PATH_MENU_KEYBOARD

    @pytest.mark.asyncio
    async def test_overview(self, menu, storage, profiled_actor, contents):
        """The overview shows goal, hours, roadmaps and the weekly plan."""
        storage.rows("user_profiles")[0].update(
            {"short_term_goal": "Internship | Job", "weekly_hours": 10}
        )
        contents.add("Backend roadmap", kind="roadmap", major="Computer Engineering - Software")
        contents.add("Civil roadmap", kind="roadmap", major="Civil Engineering")

        reply = await menu.handle(profiled_actor, TextEvent("My path"))

        assert "Goal: Internship | Job" in reply.text
        assert "Free hours per week: 10" in reply.text
        assert "1. Backend roadmap" in reply.text
        assert "Civil roadmap" not in reply.text
        assert reply.text.endswith("\n".join(WEEKLY_PLAN))
        assert reply.keyboard == PATH_MENU_KEYBOARD

    @pytest.mark.asyncio
    async def test_no_roadmap(self, menu, profiled_actor, contents):
        """Missing roadmaps and answers are shown as such."""
        reply = await menu.handle(profiled_actor, TextEvent("My path"))

        assert "Goal: -" in reply.text
        assert NO_ROADMAP_MESSAGE in reply.text
        assert contents.calls == [("list_roadmaps", ("Computer Engineering - Software", 3))]


class TestBotDispatcher:
    """Tests for routing between wizards and the menu."""

    @pytest.mark.asyncio
    async def test_menu_when_idle(self, dispatcher):
        """Without a wizard, the menu answers."""
        handled, reply = await dispatcher.dispatch("42", TextEvent("/help"))

        assert handled is False
        assert reply.text == HELP_MESSAGE

    @pytest.mark.asyncio
    async def test_wizard_takes_priority(self, dispatcher):
        """An active wizard consumes menu tokens."""
        await dispatcher.dispatch("42", TextEvent("/task"))

        handled, reply = await dispatcher.dispatch("42", TextEvent("راهنما"))

        assert handled is True
        assert "New task" in reply.text

    @pytest.mark.asyncio
    async def test_start_command_opens_wizard(self, dispatcher, sessions):
        """A start command goes to the controller."""
        handled, _ = await dispatcher.dispatch("42", TextEvent("  /goal "))

        assert handled is True
        assert sessions.get("42", WizardKind.GOAL) is not None

    @pytest.mark.asyncio
    async def test_controller_property(self, dispatcher, controller):
        """The dispatcher exposes its controller."""
        assert dispatcher.controller is controller

    @pytest.mark.asyncio
    async def test_localized_section_reaches_menu(self, dispatcher, profiled_actor, contents):
        """A localized section label is listed like its canonical token."""
        contents.add("Operating Systems", kind="course")

        handled, reply = await dispatcher.dispatch(profiled_actor, TextEvent("دروس دانشگاه"))

        assert handled is False
        assert reply.text.endswith("1. Operating Systems")

    @pytest.mark.asyncio
    async def test_section_inside_wizard_is_intercepted(self, dispatcher, contents):
        """A running wizard keeps section buttons away from the menu."""
        await dispatcher.dispatch("42", TextEvent("/task"))

        handled, _ = await dispatcher.dispatch("42", TextEvent("University notes"))

        assert handled is True
        assert contents.calls == []
