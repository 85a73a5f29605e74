"""Scan session record and the wizard that drives it.

The wizard is a reducer: ``transition(state, event)`` returns the next
state plus a list of effects (background work for the UI to start). It
never performs I/O itself, so every screen change can be tested without Qt.

Background results carry the generation they were launched against. A new
capture or a reset bumps the generation, which makes any result still in
flight stale; stale results are dropped instead of written.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from core.config import REPORT_DELAY_MS
from core.utils import ClassificationResult

RED_FLAG_SUGGESTIONS = [
    "Bleeding", "Itching", "Fast Growth", "Pain", "Color Changes",
    "Irregular Borders", "Asymmetrical", "Oozing", "Non-healing",
    "Scaly", "Raised", "Tender",
]

NO_SYMPTOMS_MESSAGE = "Please enter at least one symptom"
NO_IMAGE_MESSAGE = "Image not provided"


class Screen(Enum):
    LANDING = "landing"
    CAPTURE = "capture"
    SYMPTOMS = "symptoms"
    RESULTS = "results"
    INFORMATION = "information"
    ABOUT = "about"


class ReportStatus(Enum):
    PENDING = "pending"
    ERROR = "error"
    READY = "ready"


class VisionStatus(Enum):
    RUNNING = "running"
    DONE = "done"
    UNAVAILABLE = "unavailable"


@dataclass
class Session:
    """Everything collected during one capture-to-report journey."""
    symptoms: List[str] = field(default_factory=list)
    risk_score: int = 0  # Declared but never computed
    image_url: Optional[str] = None
    vision_result: Optional[ClassificationResult] = None
    llm_report: Optional[str] = None
    error: Optional[str] = None

    @property
    def report_status(self) -> ReportStatus:
        if self.llm_report:
            return ReportStatus.READY
        if self.error:
            return ReportStatus.ERROR
        return ReportStatus.PENDING


@dataclass
class WizardState:
    screen: Screen = Screen.LANDING
    session: Session = field(default_factory=Session)
    generation: int = 0
    symptoms_input: str = ""
    vision_loading: bool = False
    report_pending: bool = False
    notice: Optional[str] = None

    @property
    def vision_status(self) -> VisionStatus:
        """RUNNING while classification is in flight on any screen, then DONE or UNAVAILABLE."""
        if self.vision_loading:
            return VisionStatus.RUNNING
        if self.session.vision_result is not None:
            return VisionStatus.DONE
        return VisionStatus.UNAVAILABLE


# --- Events ---

@dataclass(frozen=True)
class StartScan:
    pass


@dataclass(frozen=True)
class ShowInformation:
    pass


@dataclass(frozen=True)
class ShowAbout:
    pass


@dataclass(frozen=True)
class BackToLanding:
    pass


@dataclass(frozen=True)
class ImageCaptured:
    image: str  # data URI


@dataclass(frozen=True)
class ClassificationSucceeded:
    result: ClassificationResult
    generation: int


@dataclass(frozen=True)
class ClassificationFailed:
    message: str
    generation: int


@dataclass(frozen=True)
class SymptomsEdited:
    text: str


@dataclass(frozen=True)
class SymptomToggled:
    symptom: str


@dataclass(frozen=True)
class SymptomTagRemoved:
    index: int


@dataclass(frozen=True)
class SubmitSymptoms:
    pass


@dataclass(frozen=True)
class ReportDue:
    generation: int


@dataclass(frozen=True)
class ReportSucceeded:
    text: str
    generation: int


@dataclass(frozen=True)
class ReportFailed:
    message: str
    generation: int


@dataclass(frozen=True)
class RetryReport:
    pass


@dataclass(frozen=True)
class Reset:
    pass


# --- Effects ---

@dataclass(frozen=True)
class RunClassification:
    image: str
    generation: int


@dataclass(frozen=True)
class ScheduleReport:
    generation: int
    delay_ms: int = REPORT_DELAY_MS


@dataclass(frozen=True)
class RequestReport:
    payload: dict
    generation: int


@dataclass(frozen=True)
class Notify:
    message: str


# --- Symptom text helpers ---

def parse_symptoms(text: str) -> List[str]:
    """Split comma-separated input, trimming and dropping empty entries."""
    return [s.strip() for s in (text or "").split(",") if s.strip()]


def toggle_symptom(text: str, symptom: str) -> str:
    """Add a suggestion to the input, or take it out if already present."""
    entries = parse_symptoms(text)
    if symptom in entries:
        return ", ".join(s for s in entries if s != symptom)
    return f"{text.rstrip().rstrip(',')}, {symptom}" if entries else symptom


def remove_symptom_tag(text: str, index: int) -> str:
    """Drop the entry at ``index`` of the raw comma split."""
    return ",".join(s for i, s in enumerate(text.split(",")) if i != index)


def build_analyze_payload(session: Session) -> dict:
    """Request body for the report endpoint, from the session as it is now."""
    return {
        "image": session.image_url,
        "symptoms": list(session.symptoms),
        "visionAnalysis": session.vision_result.to_dict() if session.vision_result else None,
    }


# --- Reducer ---

Effects = List[object]


def transition(state: WizardState, event) -> Tuple[WizardState, Effects]:
    """Apply one event. Unknown or out-of-place events leave state untouched."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state, []
    return handler(state, event)


def _navigate(state: WizardState, allowed: Tuple[Screen, ...], target: Screen):
    if state.screen not in allowed:
        return state, []
    return replace(state, screen=target, notice=None), []


def _on_start_scan(state, event):
    return _navigate(state, (Screen.LANDING,), Screen.CAPTURE)


def _on_show_information(state, event):
    return _navigate(state, (Screen.LANDING,), Screen.INFORMATION)


def _on_show_about(state, event):
    return _navigate(state, (Screen.LANDING,), Screen.ABOUT)


def _on_back_to_landing(state, event):
    return _navigate(state, (Screen.CAPTURE, Screen.INFORMATION, Screen.ABOUT), Screen.LANDING)


def _on_image_captured(state, event: ImageCaptured):
    if state.screen != Screen.CAPTURE:
        return state, []
    if not event.image:
        return replace(state, notice=NO_IMAGE_MESSAGE), []

    generation = state.generation + 1
    session = replace(
        state.session,
        image_url=event.image,
        vision_result=None,
        llm_report=None,
        error=None,
    )
    new_state = replace(
        state,
        screen=Screen.SYMPTOMS,
        session=session,
        generation=generation,
        vision_loading=True,
        report_pending=False,
        notice=None,
    )
    return new_state, [RunClassification(image=event.image, generation=generation)]


def _on_classification_succeeded(state, event: ClassificationSucceeded):
    if event.generation != state.generation:
        return state, []
    session = replace(state.session, vision_result=event.result)
    return replace(state, session=session, vision_loading=False), []


def _on_classification_failed(state, event: ClassificationFailed):
    if event.generation != state.generation:
        return state, []
    return replace(state, vision_loading=False), [Notify(event.message)]


def _edit_symptoms(state, text: str):
    if state.screen != Screen.SYMPTOMS:
        return state, []
    return replace(state, symptoms_input=text, notice=None), []


def _on_symptoms_edited(state, event: SymptomsEdited):
    return _edit_symptoms(state, event.text)


def _on_symptom_toggled(state, event: SymptomToggled):
    return _edit_symptoms(state, toggle_symptom(state.symptoms_input, event.symptom))


def _on_symptom_tag_removed(state, event: SymptomTagRemoved):
    return _edit_symptoms(state, remove_symptom_tag(state.symptoms_input, event.index))


def _on_submit_symptoms(state, event):
    if state.screen != Screen.SYMPTOMS:
        return state, []
    symptoms = parse_symptoms(state.symptoms_input)
    if not symptoms:
        return replace(state, notice=NO_SYMPTOMS_MESSAGE), []

    session = replace(state.session, symptoms=symptoms, llm_report=None, error=None)
    new_state = replace(
        state,
        screen=Screen.RESULTS,
        session=session,
        report_pending=True,
        notice=None,
    )
    return new_state, [ScheduleReport(generation=state.generation)]


def _on_report_due(state, event: ReportDue):
    if event.generation != state.generation or state.screen != Screen.RESULTS:
        return state, []
    payload = build_analyze_payload(state.session)
    return state, [RequestReport(payload=payload, generation=state.generation)]


def _on_report_succeeded(state, event: ReportSucceeded):
    if event.generation != state.generation:
        return state, []
    session = replace(state.session, llm_report=event.text, error=None)
    return replace(state, session=session, report_pending=False), []


def _on_report_failed(state, event: ReportFailed):
    if event.generation != state.generation:
        return state, []
    session = replace(state.session, error=event.message)
    return replace(state, session=session, report_pending=False), []


def _on_retry_report(state, event):
    if state.screen != Screen.RESULTS or state.report_pending:
        return state, []
    if state.session.report_status != ReportStatus.ERROR:
        return state, []
    session = replace(state.session, error=None)
    new_state = replace(state, session=session, report_pending=True)
    return new_state, [RequestReport(payload=build_analyze_payload(session), generation=state.generation)]


def _on_reset(state, event):
    return WizardState(screen=Screen.LANDING, generation=state.generation + 1), []


_HANDLERS = {
    StartScan: _on_start_scan,
    ShowInformation: _on_show_information,
    ShowAbout: _on_show_about,
    BackToLanding: _on_back_to_landing,
    ImageCaptured: _on_image_captured,
    ClassificationSucceeded: _on_classification_succeeded,
    ClassificationFailed: _on_classification_failed,
    SymptomsEdited: _on_symptoms_edited,
    SymptomToggled: _on_symptom_toggled,
    SymptomTagRemoved: _on_symptom_tag_removed,
    SubmitSymptoms: _on_submit_symptoms,
    ReportDue: _on_report_due,
    ReportSucceeded: _on_report_succeeded,
    ReportFailed: _on_report_failed,
    RetryReport: _on_retry_report,
    Reset: _on_reset,
}
