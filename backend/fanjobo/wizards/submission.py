"""Submission wizard: university content with a PDF upload.

Only actors with a completed profile may start it. The PDF is uploaded
during the wizard (not at confirm) into
<content kind>/<major or unknown-major>/term-<term>/user-<user id>; the
confirm step refuses to persist until that upload reference exists.
Completion inserts a pending submission and notifies moderators.
"""

from fanjobo.wizards.collaborators import NotificationSink, Storage
from fanjobo.wizards.normalizer import CONFIRM, SUBMIT_COMMAND
from fanjobo.wizards.profile import TERM_OPTIONS
from fanjobo.wizards.state import WizardKind, WizardSession
from fanjobo.wizards.steps import (
    SHORT_TEXT_MAX_LENGTH,
    StepDefinition,
    ValidatorKind,
    WizardCatalog,
)

CONTENT_KINDS = (
    "course",
    "note",
    "book",
    "resource",
    "video",
    "sample-question",
    "summary",
    "exam-tip",
)

SUBMISSION_SECTION = "university"
UNKNOWN_MAJOR = "unknown-major"
MAX_TAGS = 12

NOTIFICATION_TYPE = "submission-pending"
NOTIFICATION_TITLE = "University submission pending"

SUBMISSION_STEPS = (
    StepDefinition(
        key="contentKind",
        label="Section",
        prompt="What kind of content are you sending?",
        validator=ValidatorKind.ENUM,
        options=CONTENT_KINDS,
    ),
    StepDefinition(
        key="title",
        label="Title",
        prompt="Give it a short title.",
        validator=ValidatorKind.FREE_TEXT,
        max_length=SHORT_TEXT_MAX_LENGTH,
    ),
    StepDefinition(
        key="courseName",
        label="Course",
        prompt="Which course is it for? (optional)",
        validator=ValidatorKind.FREE_TEXT,
        required=False,
    ),
    StepDefinition(
        key="term",
        label="Term",
        prompt="Which term is it meant for?",
        validator=ValidatorKind.ENUM,
        options=TERM_OPTIONS,
        columns=3,
    ),
    StepDefinition(
        key="purpose",
        label="Purpose",
        prompt="In one or two sentences, how will this help other students?",
        validator=ValidatorKind.FREE_TEXT,
    ),
    StepDefinition(
        key="tags",
        label="Tags",
        prompt="Add tags, comma separated. (optional)",
        validator=ValidatorKind.CSV_LIST,
        required=False,
        lowercase=True,
        max_items=MAX_TAGS,
    ),
    StepDefinition(
        key="file",
        label="File",
        prompt="Send the file as a PDF document.",
        validator=ValidatorKind.FILE_ONLY,
    ),
    StepDefinition(
        key="confirm",
        prompt=f"Review your submission and press {CONFIRM} to send it for moderation.",
        validator=ValidatorKind.CONFIRM,
    ),
)


def upload_folder(session: WizardSession) -> list[str]:
    """Destination folder segments for the submitted PDF."""
    return [
        session.answers["contentKind"],
        session.context.get("major") or UNKNOWN_MAJOR,
        f"term-{session.answers['term']}",
        f"user-{session.context['user_id']}",
    ]


def require_file(session: WizardSession) -> str | None:
    """Block completion until the PDF reference is present."""
    reference = session.answers.get("file")
    if not isinstance(reference, dict) or not reference.get("file_id"):
        return "file"
    return None


def compose_description(session: WizardSession) -> str:
    """Moderator-facing description built from the answers."""
    answers = session.answers
    return "\n\n".join(
        [
            f"Section: {answers['contentKind']}",
            f"Course: {answers.get('courseName') or 'not specified'}",
            f"Target term: {answers['term']}",
            f"Purpose: {answers['purpose']}",
        ]
    )


async def save_submission(
    session: WizardSession, storage: Storage, notifier: NotificationSink
) -> None:
    """Insert the pending submission, then notify moderators."""
    answers = session.answers
    user_id = session.context["user_id"]
    reference = answers["file"]

    tags = [
        *(answers.get("tags") or []),
        f"_drive_file_id:{reference['file_id']}",
        f"_drive_mime:{reference['mime']}",
    ]
    row = await storage.insert(
        "community_content_submissions",
        {
            "user_id": user_id,
            "section": SUBMISSION_SECTION,
            "content_kind": answers["contentKind"],
            "title": answers["title"],
            "description": compose_description(session),
            "major": session.context.get("major"),
            "term": answers["term"],
            "tags": tags,
            "external_link": reference["link"],
            "status": "pending",
        },
    )
    await notifier.create(
        NOTIFICATION_TYPE,
        NOTIFICATION_TITLE,
        f"{answers['title']} requires moderation",
        {
            "submissionId": row["id"],
            "userId": user_id,
            "section": SUBMISSION_SECTION,
            "contentKind": answers["contentKind"],
        },
    )


SUBMISSION_WIZARD = WizardCatalog(
    kind=WizardKind.SUBMISSION,
    title="Content submission",
    start_command=SUBMIT_COMMAND,
    intro="Let's submit university content for other students.",
    steps=SUBMISSION_STEPS,
    writer=save_submission,
    success_message="Thanks! Your submission was sent for moderation.",
    requires_profile=True,
    upload_folder=upload_folder,
    guard=require_file,
)
