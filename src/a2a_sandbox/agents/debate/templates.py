"""Template-based argument generation for debate agents.

Needs no language model: a stable hash of the topic picks a perspective and
a template, and the topic is interpolated into it. The hash is part of the
contract, so the same topic yields the same text in every process.
"""

from dataclasses import dataclass
from typing import Literal

Perspective = Literal["ethics", "practical", "economic", "innovation"]
Phase = Literal["argue", "rebut"]
Stance = Literal["pro", "con"]

PERSPECTIVES: list[Perspective] = ["ethics", "practical", "economic", "innovation"]

OPPONENT_EXCERPT_LENGTH = 80
SUMMARY_EXCERPT_LENGTH = 60
DEFAULT_OPPONENT_POINT = "the previous argument"


def hash_string(value: str) -> int:
    """Rolling ``h * 31 + c`` hash over UTF-16 code units.

    The accumulator wraps to a signed 32-bit integer after every step and the
    absolute value of the final result is returned.
    """
    encoded = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
        if h >= 0x80000000:
            h -= 0x100000000
    return abs(h)


PRO_ARGUE_TEMPLATES: dict[Perspective, list[str]] = {
    "ethics": [
        '"{{topic}}" should be actively pursued for the sake of fairness and justice across society. '
        "Building a system that benefits everyone is our moral responsibility.",
        'Speaking in favor of "{{topic}}" from an ethical standpoint: it protects people\'s basic rights '
        "and is an important step toward a more inclusive society.",
        'Morally, "{{topic}}" is an essential effort to protect the vulnerable and correct social '
        "inequality. We owe the next generation a better society.",
        '"{{topic}}" rests on the universal values of human dignity and freedom. Making the ethically '
        "right choice raises trust across society as a whole.",
    ],
    "practical": [
        'From a practical standpoint, "{{topic}}" is an effective answer to today\'s problems. It can be '
        "introduced step by step on top of existing infrastructure, which makes it highly feasible.",
        'The practical benefits of "{{topic}}" are clear. The payoff is large relative to the cost of '
        "adoption, and visible results arrive quickly.",
        'Seen from the ground, "{{topic}}" greatly improves everyday work and life. It turns complex '
        "problems into simple ones and gives everyone involved a system that is easy to use.",
        '"{{topic}}" is not armchair theory: many earlier cases have confirmed its success, and '
        "data-driven evaluations have already demonstrated its usefulness.",
    ],
    "economic": [
        'Economically, "{{topic}}" offers a very high long-term return on investment. It needs upfront '
        "spending, but it contributes greatly to future growth and job creation.",
        'The economic impact of "{{topic}}" is immense. By opening new markets and revitalizing '
        "industry, it can lift the growth rate of the whole economy.",
        'In terms of cost-effectiveness, "{{topic}}" is excellent. It cuts today\'s social costs while '
        "creating new economic value.",
        'Investing in "{{topic}}" is the wisest way to build assets for future generations. It creates '
        "a sustainable economic model and strengthens international competitiveness.",
    ],
    "innovation": [
        '"{{topic}}" is a catalyst for innovation. It accelerates technical progress and opens new '
        "approaches to problems we could not solve before.",
        'From the standpoint of innovation, "{{topic}}" should become the next-generation standard. '
        "Moving first lets us establish a leading position worldwide.",
        '"{{topic}}" opens possibilities beyond existing frameworks. It produces creative solutions and '
        "raises society's overall capacity to innovate.",
        'For technological and social progress, "{{topic}}" is an unavoidable path. Rather than fearing '
        "change, we should actively build a new future.",
    ],
}

CON_ARGUE_TEMPLATES: dict[Perspective, list[str]] = {
    "ethics": [
        '"{{topic}}" raises serious ethical concerns. It may impose an unfair burden on some people and '
        "could infringe on individual freedom and the right to choose.",
        'I oppose this on ethical grounds. "{{topic}}" risks unintentionally deepening existing social '
        "inequality, and it should not proceed without a thorough impact assessment.",
        '"{{topic}}" may look right on the surface, but dig deeper and it carries moral dilemmas. We '
        "cannot overlook the danger that minority voices will be ignored.",
        'Morally, "{{topic}}" needs careful reconsideration. History has many examples of well-meant '
        "initiatives that ended up restricting people's rights in unintended ways.",
    ],
    "practical": [
        'Considering actual operations, "{{topic}}" faces many practical problems. Implementation on the '
        "ground is more complex than expected, and unforeseen issues are likely to keep arising.",
        'Realistically, "{{topic}}" is mere idealism. The resources, people and infrastructure it needs '
        "are not in place, and the road to realizing it is extremely hard.",
        'There are serious doubts about the feasibility of "{{topic}}". Similar efforts have often failed '
        "before, and we should not ignore the risk of repeating those mistakes.",
        'From a practitioner\'s point of view, "{{topic}}" does not reflect conditions on the ground. The '
        "gap between theory and practice is wide, and the expected benefits will be hard to achieve.",
    ],
    "economic": [
        'Given its economic impact, "{{topic}}" is fiscally unsustainable. The required budget is likely '
        "to far exceed initial estimates, cutting funds for other important areas.",
        'The cost-effectiveness of "{{topic}}" has serious problems. Spending the same budget on better '
        "alternatives would return far more to society as a whole.",
        'Economic analysis suggests "{{topic}}" risks distorting market mechanisms and creating '
        "inefficiency, which could lower the productivity of the whole economy.",
        'Overinvesting in "{{topic}}" increases economic risk. Allocating resources on a large scale '
        "amid high uncertainty can only be called fiscally irresponsible.",
    ],
    "innovation": [
        '"{{topic}}" may actually hinder true innovation. Forcing a one-size-fits-all approach limits '
        "the search for diverse solutions.",
        'I have concerns about pushing "{{topic}}" in the name of innovation. Rapid change can cause '
        "compatibility problems with existing systems and lead to confusion.",
        'We need to examine calmly whether "{{topic}}" is truly innovative. New is not always better, '
        "and overconfidence in unproven methods is dangerous.",
        'Given the technical uncertainty, a full transition to "{{topic}}" is too risky. We should '
        "validate it step by step and consider alternatives in parallel.",
    ],
}

PRO_REBUT_TEMPLATES: list[str] = [
    'I understand the opposing concerns, but the rebuttal on "{{topic}}" misses something fundamental. '
    "As for the claim {{opponent_point}}, these issues can be solved through sound policy design and "
    "gradual rollout. The risk of doing nothing is far greater.",
    'While taking the opposing view seriously, I reaffirm the importance of "{{topic}}". It was argued '
    "that {{opponent_point}}, but the latest research and data point to a different conclusion. Choosing "
    "the status quo out of fear of risk is the greatest risk of all.",
    'The opposing argument has some logic to it, but it underestimates the downside of not pursuing '
    '"{{topic}}". Regarding {{opponent_point}}, earlier cases have already established effective '
    "countermeasures. What we need now is the courage to move forward.",
    'Critical views on "{{topic}}" deepen the debate, but they overlook several important facts. The '
    "claim {{opponent_point}} is biased toward the short term. With a long-term vision, the case in "
    "favor is clearly more reasonable.",
]

CON_REBUT_TEMPLATES: list[str] = [
    'The supporting argument is passionate, but its optimism about "{{topic}}" lacks a realistic basis. '
    "It was said that {{opponent_point}}, yet cases where such an ideal scenario came true are very few. "
    "Calm analysis and careful judgment are needed.",
    'I have examined the supporting argument closely and restate my opposition to "{{topic}}". The claim '
    "{{opponent_point}} looks only at success stories and ignores the many failures. A balanced "
    "assessment is essential.",
    'The case for "{{topic}}" has its attractions, but the fundamental problems remain unresolved. '
    "Regarding {{opponent_point}}, what is correct in theory runs into many obstacles in practice. We "
    "should consider more realistic alternatives.",
    'The supporting side overstates the merits of "{{topic}}". It was argued that {{opponent_point}}, but '
    "nobody has discussed how to manage the risk if its assumptions collapse. Shouldn't we decide only "
    "after considering the worst case?",
]

SUMMARY_TEMPLATES: list[str] = [
    'Summary of the debate on "{{topic}}":\n\n'
    "[Main points in favor]\n{{pro_summary}}\n\n"
    "[Main points against]\n{{con_summary}}\n\n"
    "Both sides raised important points, and this topic calls for continued discussion from many "
    "angles. A final judgment should weigh all of these points together.",
    'Debate wrap-up: "{{topic}}"\n\n'
    "The supporting side argued:\n{{pro_summary}}\n\n"
    "The opposing side countered:\n{{con_summary}}\n\n"
    'This debate showed that "{{topic}}" has clear benefits as well as risks. Continuing a '
    "constructive dialogue is the key to finding a better solution.",
]


@dataclass
class GeneratedArgument:
    """Template output plus the perspective it was drawn from (argue only)."""

    text: str
    perspective: Perspective | None = None


def _fill(template: str, **values: str) -> str:
    for key, value in values.items():
        template = template.replace("{{" + key + "}}", value)
    return template


def _utf16_prefix(text: str, limit: int) -> str:
    """First ``limit`` UTF-16 code units of ``text``.

    A surrogate pair cut in half by the limit is dropped entirely.
    """
    encoded = text.encode("utf-16-le")
    if len(encoded) <= limit * 2:
        return text
    return encoded[: limit * 2].decode("utf-16-le", errors="ignore")


def _excerpt(text: str, limit: int) -> str:
    prefix = _utf16_prefix(text, limit)
    return prefix + ("..." if prefix != text else "")


def generate_argument(
    topic: str,
    stance: Stance,
    phase: Phase,
    opponent_argument: str | None = None,
) -> GeneratedArgument:
    """Pick and fill a template for the given topic, stance and phase.

    Args:
        topic: Debate topic
        stance: ``pro`` or ``con``
        phase: ``argue`` for an opening statement, ``rebut`` for a rebuttal
        opponent_argument: Text being rebutted (rebut phase only)

    Returns:
        Generated text, with the perspective for the argue phase
    """
    h = hash_string(topic)

    if phase == "argue":
        # perspective ignores stance; template index is offset for con
        perspective = PERSPECTIVES[h % len(PERSPECTIVES)]
        tables = PRO_ARGUE_TEMPLATES if stance == "pro" else CON_ARGUE_TEMPLATES
        templates = tables[perspective]
        template = templates[(h + (1 if stance == "con" else 0)) % len(templates)]
        return GeneratedArgument(text=_fill(template, topic=topic), perspective=perspective)

    templates = PRO_REBUT_TEMPLATES if stance == "pro" else CON_REBUT_TEMPLATES
    template = templates[h % len(templates)]
    point = (
        _excerpt(opponent_argument, OPPONENT_EXCERPT_LENGTH)
        if opponent_argument
        else DEFAULT_OPPONENT_POINT
    )
    return GeneratedArgument(text=_fill(template, topic=topic, opponent_point=f'"{point}"'))


def generate_summary(topic: str, pro_args: list[str], con_args: list[str]) -> str:
    """Summarize both sides of a debate using a topic-selected template."""
    template = SUMMARY_TEMPLATES[hash_string(topic) % len(SUMMARY_TEMPLATES)]

    def numbered(args: list[str]) -> str:
        return "\n".join(
            f"{i}. {_utf16_prefix(arg, SUMMARY_EXCERPT_LENGTH)}..."
            for i, arg in enumerate(args, start=1)
        )

    return _fill(
        template,
        topic=topic,
        pro_summary=numbered(pro_args),
        con_summary=numbered(con_args),
    )
