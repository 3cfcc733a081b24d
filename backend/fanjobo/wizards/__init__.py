"""Multi-step wizard engine for the student services bot.

A wizard is a fixed sequence of questions (a WizardCatalog). The engine
keeps one WizardSession per actor and wizard kind, validates each answer,
renders the next prompt with its reply keyboard, and writes the collected
answers to storage when the actor confirms.

Modules:
    state: Session, event and reply types
    normalizer: Canonical tokens and decorated/localized label mapping
    steps: StepDefinition, WizardCatalog and the StepCatalog registry
    validators: Per-step validation and coercion
    selection: Multi-select toggling
    keyboards: Prompt and keyboard rendering (with pagination)
    session_store: In-memory session store with idle TTL
    external: File-upload steps
    persistence: Confirm-step writes
    context: Actor context snapshot at wizard start
    controller: WizardController, the engine entry point
    profile, submission, path: The concrete wizards
    catalog: Default registry of all wizards
"""

from fanjobo.wizards.catalog import build_default_catalog
from fanjobo.wizards.collaborators import (
    DocumentFetcher,
    FileStorage,
    NotificationSink,
    Storage,
    StoredFile,
)
from fanjobo.wizards.context import ActorContextLoader
from fanjobo.wizards.controller import WizardController
from fanjobo.wizards.external import ExternalStepAdapter
from fanjobo.wizards.normalizer import normalize
from fanjobo.wizards.persistence import CompletionPersister, PersistResult, PersistStatus
from fanjobo.wizards.session_store import (
    SessionStore,
    get_session_store,
    reset_session_store,
)
from fanjobo.wizards.state import (
    NOT_HANDLED,
    DocumentEvent,
    DocumentRef,
    HandleResult,
    Reply,
    TextEvent,
    WizardEvent,
    WizardKind,
    WizardSession,
)
from fanjobo.wizards.steps import StepCatalog, StepDefinition, ValidatorKind, WizardCatalog

__all__ = [
    "NOT_HANDLED",
    "ActorContextLoader",
    "CompletionPersister",
    "DocumentEvent",
    "DocumentFetcher",
    "DocumentRef",
    "ExternalStepAdapter",
    "FileStorage",
    "HandleResult",
    "NotificationSink",
    "PersistResult",
    "PersistStatus",
    "Reply",
    "SessionStore",
    "StepCatalog",
    "StepDefinition",
    "Storage",
    "StoredFile",
    "TextEvent",
    "ValidatorKind",
    "WizardCatalog",
    "WizardController",
    "WizardEvent",
    "WizardKind",
    "WizardSession",
    "build_default_catalog",
    "get_session_store",
    "normalize",
    "reset_session_store",
]
