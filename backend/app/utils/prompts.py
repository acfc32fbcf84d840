"""
Prompt Catalog - verification specifications for every habit kind

Each entry forces the model to classify the subject first, short-circuit
off-topic photos with an "I see X, but I need Y" message, apply its rubric or
pass/fail criteria, and answer with one JSON object. User-authored text
(habit name, criteria) enters only through render_prompt().
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from app.core.constants import (
    MAX_TOKENS_BED,
    MAX_TOKENS_CUSTOM_PHOTO,
    MAX_TOKENS_CUSTOM_VIDEO,
    MAX_TOKENS_HYDRATION,
    MAX_TOKENS_PREDEFINED,
    MAX_TOKENS_SUNLIGHT,
)
from app.models.prompt import PromptSection, PromptSpec, Rubric, RubricDimension, TaxonomyEntry
from app.models.verification import (
    BedVerdict,
    HydrationVerdict,
    PhotoHabitVerdict,
    SunlightVerdict,
    VerificationKind,
    VideoHabitVerdict,
)

SCREENSHOT_POLICY_ALLOWED = """SCREENSHOT POLICY: Screenshots ARE ACCEPTED for this habit.
- Screenshots showing app interfaces, phone calls, messages, or activity are valid proof
- Only reject screenshots if they're obviously fake, heavily edited, or completely unrelated
- Focus on whether the screenshot shows legitimate proof of the habit"""

SCREENSHOT_POLICY_REJECTED = """SCREENSHOT POLICY: Screenshots are NOT ACCEPTED for this habit.
- If this appears to be a screenshot (phone screen, app interface, status bar visible), reject it
- The user must provide a live camera photo as proof
- Politely ask them to take a real photo if you detect a screenshot"""

PHOTO_VERDICT_FORMAT = {
    "is_verified": "boolean",
    "detected_subject": '"category"',
    "feedback": '"specific message"',
}


@dataclass(frozen=True)
class PromptParams:
    """Per-request values for the catalog's interpolation points"""
    habit_name: str = ""
    criteria_text: Optional[str] = None
    allow_screenshots: bool = False
    frame_count: int = 1
    duration_seconds: Optional[float] = None


# ---------------------------------------------------------------------------
# Core kinds
# ---------------------------------------------------------------------------

BED_RUBRIC = Rubric(
    title="SCORE THE BED (only if a bed is visible)",
    threshold=65,
    guidance=('Ask yourself: "Did they make their bed?" NOT "Is this hotel-quality?"',),
    dimensions=(
        RubricDimension("DUVET/COMFORTER", 35, (
            (35, "Pulled up and covering the bed (wrinkles are fine!)"),
            (25, "Mostly covering, some bunching at edges"),
            (15, "Partially pulled up but effort visible"),
            (0, "Not pulled up at all - mattress/sheets fully exposed"),
        )),
        RubricDimension("PILLOWS", 35, (
            (35, "Placed on bed (arranged, stacked, or just set there - all fine!)"),
            (25, "On bed but messy/fallen over"),
            (15, "Partially off bed or half-effort"),
            (0, "Missing, on floor, or scattered around room"),
        )),
        RubricDimension("OVERALL EFFORT", 30, (
            (30, "Clearly made an effort - this is a made bed"),
            (20, "Quick job but they tried"),
            (10, "Minimal effort visible"),
            (0, "No attempt / obviously just woke up and left"),
        )),
    ),
)

BED_PROMPT = PromptSpec(
    key=VerificationKind.BED.value,
    verdict_model=BedVerdict,
    max_output_tokens=MAX_TOKENS_BED,
    preamble=(
        'ROLE: You are a friendly morning habit verifier. Your job is to answer: "Did this person make their bed?"',
        "",
        "This is NOT a hotel inspection. Normal wrinkles, natural fabric draping, and everyday bed-making "
        "are totally fine. Only fail beds that are genuinely unmade.",
        "",
        "IMPORTANT: The user only sees PASS or FAIL with your feedback message. They do NOT see any scores. "
        "Never mention scores, points, or numbers in your feedback.",
    ),
    subject_instruction=("First, describe what you ACTUALLY see. Set detected_subject to one of:",),
    taxonomy=(
        TaxonomyEntry("bed", "if a real bed with mattress/bedding is visible"),
        TaxonomyEntry("bathroom", "toilet, shower, sink, etc."),
        TaxonomyEntry("kitchen", "stove, fridge, counters, etc."),
        TaxonomyEntry("desk", "workspace, computer setup"),
        TaxonomyEntry("couch", "sofa or loveseat (NOT a bed)"),
        TaxonomyEntry("screenshot", "clearly a photo of a screen or another photo"),
        TaxonomyEntry("stock_photo", "unnaturally perfect/staged, watermarks, or obviously not personal"),
        TaxonomyEntry("other", "anything else (pet, food, random object, person without bed)"),
    ),
    relevant_subjects=("bed",),
    off_topic_feedback="I see [specific thing], but I need to see your bed!",
    rubric=BED_RUBRIC,
    feedback_rules=(
        "Be encouraging! This is about building a morning habit, not perfection.",
        'Pass (high effort): Celebrate! ("Nice work! Your bed looks great.")',
        "Pass (decent effort): Positive acknowledgment (\"Bed's made - you're good to go!\")",
        'Fail (almost there): Helpful, not harsh ("Just pull that comforter up and you\'re set!")',
        'Fail (not made): Friendly nudge ("Looks like the bed still needs making - pull up that blanket!")',
    ),
    response_format={"is_made": "boolean", "detected_subject": '"bed"', "feedback": '"specific message"'},
)

SUNLIGHT_PROMPT = PromptSpec(
    key=VerificationKind.SUNLIGHT.value,
    verdict_model=SunlightVerdict,
    max_output_tokens=MAX_TOKENS_SUNLIGHT,
    preamble=("TASK: Verify this photo shows NATURAL LIGHT exposure.",),
    subject_instruction=("Set detected_subject to what best describes the scene:",),
    taxonomy=(
        TaxonomyEntry("outdoor_daylight", "outside with natural sunlight/daylight"),
        TaxonomyEntry("window_daylight", "indoors but with visible natural light from windows"),
        TaxonomyEntry("dark_indoor", "indoor space with no natural light"),
        TaxonomyEntry("artificial_light", "room lit only by lamps/screens/LEDs"),
        TaxonomyEntry("nighttime", "clearly night (dark sky, stars, moon)"),
        TaxonomyEntry("screenshot", "photo of a screen or another image"),
        TaxonomyEntry("unrelated", "random object with no light context"),
    ),
    relevant_subjects=("outdoor_daylight", "window_daylight", "dark_indoor", "artificial_light", "nighttime"),
    off_topic_feedback="I see [what's there], but I need to see natural light exposure!",
    pass_criteria=(
        "Outdoor daylight (sunny, overcast, cloudy all count)",
        "Indoors with visible natural daylight through windows",
    ),
    fail_criteria=(
        "Nighttime scene",
        "Only artificial lighting visible",
        "Dark indoor space",
        "Screenshot or unrelated image",
    ),
    feedback_rules=(
        'If artificial light only: "That\'s artificial light - step outside or near a window!"',
        'If nighttime: "It\'s dark out! Catch some rays tomorrow morning."',
        'If passed: Acknowledge the light ("Beautiful morning light!" or "Good window setup!")',
    ),
    response_format={"is_outside": "boolean", "detected_subject": '"category"', "feedback": '"specific message"'},
)

HYDRATION_PROMPT = PromptSpec(
    key=VerificationKind.HYDRATION.value,
    verdict_model=HydrationVerdict,
    max_output_tokens=MAX_TOKENS_HYDRATION,
    preamble=("TASK: Verify this photo shows HYDRATION (a beverage or drinking vessel).",),
    subject_instruction=("Set detected_subject to what you see:",),
    taxonomy=(
        TaxonomyEntry("water_bottle", "reusable water bottle or tumbler"),
        TaxonomyEntry("glass", "drinking glass with beverage"),
        TaxonomyEntry("mug", "coffee mug or tea cup"),
        TaxonomyEntry("person_drinking", "someone actively drinking"),
        TaxonomyEntry("food", "food items (not drinks)"),
        TaxonomyEntry("electronics", "phone, computer, etc."),
        TaxonomyEntry("furniture", "bed, desk, couch"),
        TaxonomyEntry("screenshot", "photo of a screen"),
        TaxonomyEntry("other", "anything else unrelated"),
    ),
    relevant_subjects=("water_bottle", "glass", "mug", "person_drinking"),
    off_topic_feedback="I see [what's there], but where's your drink?",
    pass_criteria=(
        "Any drinking vessel visible (full, partially full, or empty)",
        "Person actively drinking",
        "Water, coffee, tea, juice, smoothie, sports drink - all count!",
    ),
    fail_criteria=(
        "No drinking vessel at all",
        "Only food, no drinks",
        "Random objects, electronics, furniture",
    ),
    criteria_notes=("Be lenient - the goal is encouraging hydration!",),
    feedback_rules=(
        'If passed: Acknowledge what you see ("Nice water bottle!" or "Coffee counts!")',
        'Empty vessel: "Already finished? That\'s the spirit!"',
    ),
    response_format={"is_water": "boolean", "detected_subject": '"category"', "feedback": '"specific message"'},
)

CUSTOM_PHOTO_RUBRIC = Rubric(
    title="SCORE THE PHOTO (0-100 points)",
    threshold=65,
    dimensions=(
        RubricDimension("RELEVANCE TO HABIT", 40, (
            (40, "Perfectly captures the habit being done"),
            (30, "Clearly shows the habit activity"),
            (20, "Related but indirect evidence"),
            (10, "Loosely connected"),
            (0, "Completely unrelated"),
        )),
        RubricDimension("CRITERIA MATCH", 40, (
            (40, "Fully meets user's verification criteria"),
            (30, "Mostly meets criteria"),
            (20, "Partially meets criteria"),
            (10, "Barely addresses criteria"),
            (0, "Doesn't match at all"),
        )),
        RubricDimension("CLARITY & EFFORT", 20, (
            (20, "Clear photo, obvious effort"),
            (15, "Reasonably clear"),
            (10, "Somewhat unclear but acceptable"),
            (5, "Poor quality but discernible"),
            (0, "Cannot determine what's shown"),
        )),
    ),
)

CUSTOM_PHOTO_PROMPT = PromptSpec(
    key=VerificationKind.CUSTOM_PHOTO.value,
    verdict_model=PhotoHabitVerdict,
    max_output_tokens=MAX_TOKENS_CUSTOM_PHOTO,
    requires_habit=True,
    default_criteria="Verify that this habit has been completed.",
    preamble=(
        "ROLE: You are a sharp-eyed habit verification AI. Be honest, specific, and catch gaming attempts.",
        "",
        'TASK: Verify this photo for the custom habit "$habit_name" using the user\'s criteria.',
        "",
        "User's verification criteria: $criteria",
        "",
        "$screenshot_policy",
    ),
    subject_instruction=(
        "Set detected_subject to a brief description of what you actually see.",
        'Examples: "person exercising", "notebook with writing", "kitchen counter", '
        '"bathroom sink", "random object", "screenshot"',
        "",
        "Gaming detection - FAIL immediately if you see:",
        "- Stock photo / obviously not personal",
        '- Completely unrelated to "$habit_name"',
    ),
    off_topic_feedback="I see [specific thing], but I need to see proof of $habit_name!",
    rubric=CUSTOM_PHOTO_RUBRIC,
    feedback_rules=(
        "Score >= 85: Celebrate! (\"Perfect! That's exactly what I'm looking for!\")",
        "Score 65-84: Acknowledge with encouragement",
        'Score 40-64: Name what\'s missing ("I see X, but I need to see Y")',
        "Score < 40: Explain what would count as valid proof",
    ),
    response_format={
        "is_verified": "boolean",
        "detected_subject": '"brief description"',
        "feedback": '"specific message"',
    },
)

CUSTOM_VIDEO_PROMPT = PromptSpec(
    key=VerificationKind.CUSTOM_VIDEO.value,
    verdict_model=VideoHabitVerdict,
    max_output_tokens=MAX_TOKENS_CUSTOM_VIDEO,
    requires_habit=True,
    default_criteria="Verify that this action was performed.",
    preamble=(
        "ROLE: You are a sharp-eyed action verification AI. Analyze video frames to verify the user "
        "completed their habit.",
        "",
        'TASK: Verify this video for the habit "$habit_name" using the user\'s criteria.',
        "",
        "You are seeing $frame_count frames extracted from $clip_description, shown in chronological order.",
        "",
        "User's verification criteria: $criteria",
    ),
    guidance_sections=(
        PromptSection("CRITICAL - ANALYZE AS A SEQUENCE", (
            "These frames show PROGRESSION over time, not separate photos:",
            "1. Look for evidence the ACTION was actually performed",
            "2. Verify movement/change between frames shows the activity",
            "3. Be lenient on form/perfection but verify the core action happened",
        )),
        PromptSection("DETECT CHEATING", (
            "FAIL immediately if you detect:",
            "- Video of a video / screen recording",
            "- Still images with no movement between frames",
            "- Completely unrelated content",
            "- Someone else doing the action (not the user)",
        )),
    ),
    criteria_title="VERIFICATION CRITERIA",
    pass_criteria=(
        "Frames show clear progression of the described action",
        'The action matches the habit "$habit_name"',
        "Movement between frames indicates real activity",
    ),
    fail_criteria=(
        "No relevant action visible",
        "Static/no movement (just showing equipment doesn't count)",
        "Content doesn't match the criteria",
        "Obvious cheating attempt",
    ),
    feedback_rules=(
        'If passed: Acknowledge what you saw ("Great form on those pushups!")',
        "If failed: Explain specifically what was missing or wrong",
        "detected_action: Brief description of what you actually saw happen",
        'confidence: "high" if very clear, "medium" if some uncertainty, "low" if barely passed',
    ),
    response_format={
        "is_verified": "boolean",
        "feedback": '"specific message"',
        "detected_action": '"what happened"',
        "confidence": '"high/medium/low"',
    },
)


# ---------------------------------------------------------------------------
# Predefined habits (photo, pass/fail criteria)
# ---------------------------------------------------------------------------

def _predefined_photo_prompt(key: str, task: str, taxonomy, relevant, off_topic, passes, fails,
                             rules, notes=()) -> PromptSpec:
    return PromptSpec(
        key=key,
        verdict_model=PhotoHabitVerdict,
        max_output_tokens=MAX_TOKENS_PREDEFINED,
        preamble=(f"TASK: Verify this photo shows {task}.",),
        subject_instruction=("Set detected_subject to one of:",),
        taxonomy=tuple(TaxonomyEntry(label, description) for label, description in taxonomy),
        relevant_subjects=relevant,
        off_topic_feedback=off_topic,
        pass_criteria=passes,
        fail_criteria=fails,
        criteria_notes=notes,
        feedback_rules=rules,
        response_format=PHOTO_VERDICT_FORMAT,
    )


HEALTHY_BREAKFAST_PROMPT = _predefined_photo_prompt(
    "healthyBreakfast", "a HEALTHY BREAKFAST",
    taxonomy=(
        ("healthy_meal", "fruits, vegetables, eggs, oatmeal, yogurt, whole grains, smoothie, avocado toast"),
        ("unhealthy_meal", "donuts, sugary cereal, pastries, candy, chips"),
        ("beverage_only", "just coffee/tea with no food"),
        ("screenshot", "photo of a screen"),
        ("other", "unrelated content"),
    ),
    relevant=("healthy_meal", "unhealthy_meal", "beverage_only"),
    off_topic="I see [what's there], but where's your breakfast?",
    passes=(
        "Nutritious food visible: eggs, avocado, oatmeal, yogurt, fruit, vegetables, whole grain toast, smoothie",
        "Mixed meals count if they include healthy components",
    ),
    fails=(
        "Only sugary/processed foods (donuts, pastries, sugary cereal)",
        "No food visible (beverage only)",
        "Unrelated content",
    ),
    notes=("Be encouraging about healthy eating choices!",),
    rules=(
        'If passed: Celebrate the healthy choice! ("Great choice! Protein and fiber to fuel your morning.")',
        'If failed (unhealthy): Gentle nudge ("That looks tasty, but try adding some fruit or eggs!")',
    ),
)

MORNING_JOURNAL_PROMPT = _predefined_photo_prompt(
    "morningJournal", "a JOURNAL with writing",
    taxonomy=(
        ("journal_writing", "open notebook/journal with visible handwriting"),
        ("journal_closed", "closed notebook or journal"),
        ("journal_blank", "open but blank pages"),
        ("digital_journal", "tablet or phone showing notes app with writing"),
        ("screenshot", "photo of a screen showing something else"),
        ("other", "unrelated content"),
    ),
    relevant=("journal_writing", "journal_closed", "journal_blank", "digital_journal"),
    off_topic="I see [what's there], but where's your journal?",
    passes=(
        "Open journal/notebook with visible handwriting (doesn't need to be readable)",
        "Digital notes app showing today's writing",
    ),
    fails=("Closed journal (no proof of writing)", "Blank pages", "Unrelated content"),
    rules=(
        'If passed: Acknowledge the effort ("Love to see those morning thoughts on paper!")',
        'If closed: "Open it up and show me today\'s entry!"',
        'If blank: "Those pages look empty - time to write!"',
    ),
)

VITAMINS_PROMPT = _predefined_photo_prompt(
    "vitamins", "VITAMINS or SUPPLEMENTS being taken",
    taxonomy=(
        ("vitamins_visible", "vitamin bottles, pill organizers, loose vitamins/supplements"),
        ("person_taking", "someone holding or taking vitamins"),
        ("pill_organizer", "weekly pill organizer with compartments"),
        ("screenshot", "photo of a screen"),
        ("other", "unrelated content"),
    ),
    relevant=("vitamins_visible", "person_taking", "pill_organizer"),
    off_topic="I see [what's there], but where are your vitamins?",
    passes=("Vitamins, supplements, or pill organizer visible", "Person actively taking vitamins"),
    fails=("No vitamins or supplements visible", "Unrelated content"),
    notes=("Be encouraging - taking vitamins is a great habit!",),
    rules=('If passed: "Nice! Keeping up with your supplements."',),
)

SKINCARE_PROMPT = _predefined_photo_prompt(
    "skincare", "SKINCARE products or routine",
    taxonomy=(
        ("skincare_products", "moisturizer, serum, sunscreen, cleanser, toner"),
        ("person_applying", "someone applying skincare products"),
        ("makeup_only", "only makeup products (not skincare)"),
        ("screenshot", "photo of a screen"),
        ("other", "unrelated content"),
    ),
    relevant=("skincare_products", "person_applying", "makeup_only"),
    off_topic="I see [what's there], but where's your skincare?",
    passes=(
        "Skincare products visible (moisturizer, sunscreen, serum, cleanser, etc.)",
        "Person applying skincare",
    ),
    fails=("Only makeup products (no skincare)", "Unrelated content"),
    rules=(
        'If passed: "Your skin will thank you! Great routine."',
        'If makeup only: "I see makeup, but show me your skincare products!"',
    ),
)

MEAL_PREP_PROMPT = _predefined_photo_prompt(
    "mealPrep", "MEAL PREP",
    taxonomy=(
        ("meal_containers", "food storage containers with prepared meals"),
        ("packed_lunch", "lunch box or bag with food"),
        ("prep_in_progress", "actively cooking or chopping ingredients"),
        ("groceries", "raw ingredients not being prepped"),
        ("screenshot", "photo of a screen"),
        ("other", "unrelated content"),
    ),
    relevant=("meal_containers", "packed_lunch", "prep_in_progress", "groceries"),
    off_topic="I see [what's there], but where's your meal prep?",
    passes=(
        "Meal prep containers with food inside",
        "Packed lunch/lunchbox ready to go",
        "Active food preparation (cooking, chopping, assembling)",
    ),
    fails=("Empty containers", "Just raw groceries sitting there", "Unrelated content"),
    rules=(
        'If passed: "Prepped and ready! That\'s setting yourself up for success."',
        'If groceries: "Great ingredients! Now let\'s see them prepped."',
    ),
)


# ---------------------------------------------------------------------------
# Lookup and rendering
# ---------------------------------------------------------------------------

PROMPT_CATALOG: Dict[str, PromptSpec] = {
    spec.key: spec
    for spec in (
        BED_PROMPT,
        SUNLIGHT_PROMPT,
        HYDRATION_PROMPT,
        CUSTOM_PHOTO_PROMPT,
        CUSTOM_VIDEO_PROMPT,
        HEALTHY_BREAKFAST_PROMPT,
        MORNING_JOURNAL_PROMPT,
        VITAMINS_PROMPT,
        SKINCARE_PROMPT,
        MEAL_PREP_PROMPT,
    )
}

# Habit types accepted by the predefined-habit endpoint
PREDEFINED_HABIT_TYPES: Tuple[str, ...] = (
    "bed",
    "sunlight",
    "hydration",
    "healthyBreakfast",
    "morningJournal",
    "vitamins",
    "skincare",
    "mealPrep",
)


def get_prompt_spec(key) -> PromptSpec:
    """
    Look up a catalog entry by verification kind or predefined habit type

    Args:
        key: VerificationKind or catalog key string

    Returns:
        The immutable PromptSpec

    Raises:
        KeyError if the key is not in the catalog
    """
    if isinstance(key, VerificationKind):
        key = key.value
    return PROMPT_CATALOG[key]


def describe_clip(duration_seconds: Optional[float]) -> str:
    """Human phrasing of the clip length used in the video prompt"""
    if duration_seconds is None:
        return "a short video"
    return f"a {int(round(duration_seconds))}-second video"


def render_prompt(key, params: Optional[PromptParams] = None) -> str:
    """
    Render the full instruction text for one verification request.

    habit_name and criteria_text are interpolated verbatim; blank criteria
    fall back to the entry's generic instruction.

    Args:
        key: VerificationKind or catalog key string
        params: Per-request interpolation values

    Returns:
        Prompt text to send after the image(s)
    """
    spec = get_prompt_spec(key)
    params = params or PromptParams()

    criteria = params.criteria_text
    if not criteria or not criteria.strip():
        criteria = spec.default_criteria or ""

    values = {
        "habit_name": params.habit_name,
        "criteria": criteria,
        "screenshot_policy": SCREENSHOT_POLICY_ALLOWED if params.allow_screenshots else SCREENSHOT_POLICY_REJECTED,
        "frame_count": str(params.frame_count),
        "clip_description": describe_clip(params.duration_seconds),
    }
    return spec.build_template().substitute(values)
