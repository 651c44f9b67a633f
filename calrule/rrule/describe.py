"""Human-readable description of recurrence rules."""

from typing import TYPE_CHECKING, Callable, Optional

from .models import WEEKDAY_LABELS, RecurrenceType, Weekday

if TYPE_CHECKING:
    from ..timezone import TimezoneContext
    from .rule import RecurrenceRule

Translator = Callable[[str], str]

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def _untranslated(text: str) -> str:
    return text


def _repeated_days(rule: "RecurrenceRule", lang: Translator) -> list[str]:
    weekly = rule.type == RecurrenceType.WEEKLY
    if rule.weekday_mask == Weekday.ALLDAYS:
        return [lang("all") if weekly else lang("day")]
    if rule.weekday_mask == Weekday.WORKDAYS:
        return [lang("workdays") if weekly else lang("workday")]
    return [lang(label) for bit, label in WEEKDAY_LABELS if rule.weekday_mask & bit]


def describe(
    rule: "RecurrenceRule",
    translate: Optional[Translator] = None,
    context: Optional["TimezoneContext"] = None,
) -> str:
    """Describe a rule for display, eg. ``Weekly (days repeated: Monday, Friday, Interval: 2)``.

    The description is derived from the rule's fields only and never
    iterates the series.

    Args:
        rule: Rule to describe
        translate: Callable localizing each user-visible word, identity by default
        context: Timezone context whose user timezone and date format are used
            for the end date; the series timezone and ISO dates otherwise

    Returns:
        Description, empty for non-recurring rules
    """
    if rule.type == RecurrenceType.NONE:
        return ""

    lang = translate or _untranslated
    # "Monthly (by date)" and "Monthly (by day)" both read as "Monthly"
    text = lang(rule.type.label).split(" (")[0]

    extras = []
    if rule.end_date is not None:
        end_date = rule.end_date
        date_format = DEFAULT_DATE_FORMAT
        if context is not None:
            end_date = end_date.astimezone(context.user_timezone)
            date_format = context.date_format
        weekday_name = WEEKDAY_LABELS[end_date.weekday()][1]
        extras.append(f"{lang('ends')}: {lang(weekday_name)}, {end_date.strftime(date_format)}")

    if rule.type == RecurrenceType.MONTHLY_MDAY:
        day = rule.monthly_day_of_month
        extras.append(f"{lang('last') if day == -1 else f'{day}.'} {lang('day')}")
    elif rule.type == RecurrenceType.WEEKLY:
        days = _repeated_days(rule, lang)
        if days:
            extras.append(f"{lang('days repeated')}: {', '.join(days)}")
    elif rule.type == RecurrenceType.MONTHLY_WDAY:
        ordinal = rule.monthly_weekday_ordinal
        prefix = lang("last") if ordinal == -1 else f"{ordinal}."
        extras.append(f"{prefix} {', '.join(_repeated_days(rule, lang))}")

    if rule.interval > 1:
        extras.append(f"{lang('Interval')}: {rule.interval}")

    if extras:
        text += f" ({', '.join(extras)})"
    return text
