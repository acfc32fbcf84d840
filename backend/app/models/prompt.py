"""
Prompt Catalog data model - verification rubrics as structured configuration

A PromptSpec is immutable and shared by every request of its kind. Text
fields may contain the interpolation points $habit_name, $criteria,
$screenshot_policy, $frame_count and $clip_description; everything else is
static. build_template() lays an entry out as numbered steps.
"""
import json
from dataclasses import dataclass
from string import Template
from typing import Dict, List, Optional, Tuple, Type

from app.models.verification import Verdict

BANNER = "═" * 63

FEEDBACK_RULE = (
    "Feedback must be SPECIFIC to what you see. Keep it to 2 sentences max. "
    "NEVER mention scores, points, or numbers."
)

SINGLE_OBJECT_RULE = "Reply with exactly one JSON object and nothing else."


@dataclass(frozen=True)
class TaxonomyEntry:
    """One allowed detected_subject label"""
    label: str
    description: str


@dataclass(frozen=True)
class RubricDimension:
    """A scoring dimension with its point levels, highest first"""
    name: str
    max_points: int
    levels: Tuple[Tuple[int, str], ...]

    def __post_init__(self):
        points = [p for p, _ in self.levels]
        if not points or max(points) != self.max_points or min(points) < 0:
            raise ValueError(f"Rubric dimension '{self.name}' levels must span 0..{self.max_points}")


@dataclass(frozen=True)
class Rubric:
    """Point-based scoring scheme collapsed to a boolean by a fixed threshold"""
    title: str
    dimensions: Tuple[RubricDimension, ...]
    threshold: int
    guidance: Tuple[str, ...] = ()

    def __post_init__(self):
        if not 0 < self.threshold <= self.max_total:
            raise ValueError(f"Rubric threshold {self.threshold} outside 1..{self.max_total}")

    @property
    def max_total(self) -> int:
        return sum(d.max_points for d in self.dimensions)

    def passes(self, total: int) -> bool:
        """Map a rubric total to the pass flag"""
        if total < 0 or total > self.max_total:
            raise ValueError(f"Rubric total {total} outside 0..{self.max_total}")
        return total >= self.threshold


@dataclass(frozen=True)
class PromptSection:
    """A free-form titled block of instructions"""
    title: str
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class PromptSpec:
    """One entry in the Prompt Catalog"""
    key: str
    verdict_model: Type[Verdict]
    max_output_tokens: int
    preamble: Tuple[str, ...]
    response_format: Dict[str, str]
    subject_instruction: Tuple[str, ...] = ()
    taxonomy: Tuple[TaxonomyEntry, ...] = ()
    relevant_subjects: Tuple[str, ...] = ()
    off_topic_feedback: Optional[str] = None
    guidance_sections: Tuple[PromptSection, ...] = ()
    rubric: Optional[Rubric] = None
    pass_criteria: Tuple[str, ...] = ()
    fail_criteria: Tuple[str, ...] = ()
    criteria_notes: Tuple[str, ...] = ()
    criteria_title: str = "DETERMINE PASS/FAIL"
    feedback_rules: Tuple[str, ...] = ()
    feedback_title: str = "RESPOND WITH SPECIFIC FEEDBACK"
    default_criteria: Optional[str] = None
    requires_habit: bool = False

    def __post_init__(self):
        labels = set(self.taxonomy_labels)
        unknown = [s for s in self.relevant_subjects if s not in labels]
        if unknown:
            raise ValueError(f"Prompt '{self.key}' relevant subjects not in taxonomy: {unknown}")
        missing = set(self.verdict_model.model_fields) - set(self.response_format)
        if missing:
            raise ValueError(f"Prompt '{self.key}' response format is missing fields: {sorted(missing)}")

    @property
    def pass_field(self) -> str:
        return self.verdict_model.PASS_FIELD

    @property
    def taxonomy_labels(self) -> Tuple[str, ...]:
        return tuple(entry.label for entry in self.taxonomy)

    def is_on_taxonomy(self, subject: str) -> bool:
        """True when the entry has no closed taxonomy or the subject is one of its labels"""
        return not self.taxonomy or subject in self.taxonomy_labels

    def build_template(self) -> Template:
        """Assemble the full instruction text as a string.Template"""
        return Template("\n".join(self._assemble()))

    # -- assembly -----------------------------------------------------------

    def _assemble(self) -> List[str]:
        lines = list(self.preamble)
        steps = []

        identify = self._identify_lines()
        if identify:
            steps.append(("IDENTIFY WHAT'S IN THE PHOTO", identify))
        for section in self.guidance_sections:
            steps.append((section.title, list(section.lines)))
        if self.rubric:
            steps.append((self.rubric.title, self._rubric_lines()))
        elif self.pass_criteria or self.fail_criteria:
            steps.append((self.criteria_title, self._criteria_lines()))
        steps.append((self.feedback_title, self._feedback_lines()))

        for number, (title, body) in enumerate(steps, start=1):
            lines += ["", BANNER, f"STEP {number}: {title}", BANNER]
            lines += body

        lines += ["", f"JSON format (all fields required). {SINGLE_OBJECT_RULE}", self._format_line()]
        return lines

    def _identify_lines(self) -> List[str]:
        lines = list(self.subject_instruction)
        for entry in self.taxonomy:
            lines.append(f'- "{entry.label}" - {entry.description}')
        if self.off_topic_feedback:
            if self.relevant_subjects:
                quoted = ", ".join(f'"{s}"' for s in self.relevant_subjects)
                if len(self.relevant_subjects) == 1:
                    lines += ["", f"If detected_subject is NOT {quoted}, respond immediately:"]
                else:
                    lines += ["", f"If detected_subject is NOT one of {quoted}, respond immediately:"]
            else:
                lines += ["", "If the photo is unrelated, respond immediately:"]
            lines.append(self._short_circuit_line())
        return lines

    def _short_circuit_line(self) -> str:
        payload = {self.pass_field: False}
        for name in self.verdict_model.model_fields:
            if name == "detected_subject":
                payload[name] = "[what you see]"
            elif name == "feedback":
                payload[name] = self.off_topic_feedback
        return json.dumps(payload, ensure_ascii=False)

    def _rubric_lines(self) -> List[str]:
        lines = list(self.rubric.guidance)
        for dimension in self.rubric.dimensions:
            if lines:
                lines.append("")
            lines.append(f"{dimension.name} (0-{dimension.max_points}):")
            for points, description in dimension.levels:
                lines.append(f"  {points}:{' ' * (3 - len(str(points)))}{description}")
        return lines

    def _criteria_lines(self) -> List[str]:
        lines = []
        if self.pass_criteria:
            lines.append(f"PASS ({self.pass_field}: true) if:")
            lines += [f"- {c}" for c in self.pass_criteria]
        if self.fail_criteria:
            if lines:
                lines.append("")
            lines.append(f"FAIL ({self.pass_field}: false) if:")
            lines += [f"- {c}" for c in self.fail_criteria]
        if self.criteria_notes:
            lines.append("")
            lines += list(self.criteria_notes)
        return lines

    def _feedback_lines(self) -> List[str]:
        lines = []
        if self.rubric:
            lines.append(f"- {self.pass_field} = true ONLY if score >= {self.rubric.threshold}")
        lines.append(f"- {FEEDBACK_RULE}")
        lines += [f"  * {rule}" for rule in self.feedback_rules]
        return lines

    def _format_line(self) -> str:
        fields = ", ".join(f'"{name}": {placeholder}' for name, placeholder in self.response_format.items())
        return "{" + fields + "}"
