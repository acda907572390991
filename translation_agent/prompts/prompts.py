from typing import Dict, Mapping, NamedTuple

from translation_agent.core.exceptions import TemplateError


class PromptPair(NamedTuple):
    """A pair of system and user prompts for one completion call."""
    system: str
    user: str


# ============================================================================
# SHARED PROMPT SECTIONS
# ============================================================================

_REFLECTION_CRITERIA = """When writing suggestions, pay attention to whether there are ways to improve the translation's
(i) accuracy (by correcting errors of addition, mistranslation, omission, or untranslated text),
(ii) fluency (by applying {target_lang} grammar, spelling and punctuation rules, and ensuring there are no unnecessary repetitions),
(iii) style (by ensuring the translations reflect the style of the source text and take into account any cultural context),
(iv) terminology (by ensuring terminology use is consistent and reflects the source text domain; and by only ensuring you use equivalent idioms {target_lang}).

Write a list of specific, helpful and constructive suggestions for improving the translation.
Each suggestion should address one specific part of the translation.
Output only the suggestions and nothing else."""

_IMPROVEMENT_CRITERIA = """(i) accuracy (by correcting errors of addition, mistranslation, omission, or untranslated text),
(ii) fluency (by applying {target_lang} grammar, spelling and punctuation rules and ensuring there are no unnecessary repetitions),
(iii) style (by ensuring the translations reflect the style of the source text)
(iv) terminology (inappropriate for context, inconsistent use), or
(v) other errors."""

_COUNTRY_STYLE = """The final style and tone of the translation should match the style of {target_lang} colloquially spoken in {country}."""

_MULTI_CHUNK_CONTEXT = """The source text is below, delimited by XML tags <SOURCE_TEXT> and </SOURCE_TEXT>, and the part that has been translated
is delimited by <TRANSLATE_THIS> and </TRANSLATE_THIS> within the source text. You can use the rest of the source text
as context for critiquing the translated part.

<SOURCE_TEXT>
{tagged_text}
</SOURCE_TEXT>

To reiterate, only part of the text is being translated, shown here again between <TRANSLATE_THIS> and </TRANSLATE_THIS>:
<TRANSLATE_THIS>
{chunk_to_translate}
</TRANSLATE_THIS>

The translation of the indicated part, delimited below by <TRANSLATION> and </TRANSLATION>, is as follows:
<TRANSLATION>
{translation_1_chunk}
</TRANSLATION>"""


# ============================================================================
# SYSTEM MESSAGES
# ============================================================================

_TRANSLATOR_SYSTEM = "You are an expert linguist, specializing in translation from {source_lang} to {target_lang}."

_REVIEWER_SYSTEM = """You are an expert linguist specializing in translation from {source_lang} to {target_lang}.
You will be provided with a source text and its translation and your goal is to improve the translation."""

_EDITOR_SYSTEM = "You are an expert linguist, specializing in translation editing from {source_lang} to {target_lang}."


# ============================================================================
# ONE-CHUNK TEMPLATES
# ============================================================================

_ONE_CHUNK_INITIAL = """This is an {source_lang} to {target_lang} translation, please provide the {target_lang} translation for this text.
Do not provide any explanations or text apart from the translation.
{source_lang}: {source_text}

{target_lang}:"""

_ONE_CHUNK_REFLECTION_HEADER = """Your task is to carefully read a source text and a translation from {source_lang} to {target_lang}, and then give constructive criticisms and helpful suggestions to improve the translation."""

_ONE_CHUNK_REFLECTION_BODY = """The source text and initial translation, delimited by XML tags <SOURCE_TEXT></SOURCE_TEXT> and <TRANSLATION></TRANSLATION>, are as follows:

<SOURCE_TEXT>
{source_text}
</SOURCE_TEXT>

<TRANSLATION>
{translation_1}
</TRANSLATION>

""" + _REFLECTION_CRITERIA

_ONE_CHUNK_REFLECTION = _ONE_CHUNK_REFLECTION_HEADER + "\n\n" + _ONE_CHUNK_REFLECTION_BODY

_ONE_CHUNK_REFLECTION_COUNTRY = (
    _ONE_CHUNK_REFLECTION_HEADER + "\n" + _COUNTRY_STYLE + "\n\n" + _ONE_CHUNK_REFLECTION_BODY
)

_ONE_CHUNK_IMPROVEMENT = """Your task is to carefully read, then edit, a translation from {source_lang} to {target_lang}, taking into
account a list of expert suggestions and constructive criticisms.

The source text, the initial translation, and the expert linguist suggestions are delimited by XML tags <SOURCE_TEXT></SOURCE_TEXT>, <TRANSLATION></TRANSLATION> and <EXPERT_SUGGESTIONS></EXPERT_SUGGESTIONS>
as follows:

<SOURCE_TEXT>
{source_text}
</SOURCE_TEXT>

<TRANSLATION>
{translation_1}
</TRANSLATION>

<EXPERT_SUGGESTIONS>
{reflection}
</EXPERT_SUGGESTIONS>

Please take into account the expert suggestions when editing the translation. Edit the translation by ensuring:

""" + _IMPROVEMENT_CRITERIA + """

Output only the new translation and nothing else."""


# ============================================================================
# MULTI-CHUNK TEMPLATES
# ============================================================================

_MULTI_CHUNK_INITIAL = """Your task is to provide a professional translation from {source_lang} to {target_lang} of PART of a text.

The source text is below, delimited by XML tags <SOURCE_TEXT> and </SOURCE_TEXT>. Translate only the part within the source text
delimited by <TRANSLATE_THIS> and </TRANSLATE_THIS>. You can use the rest of the source text as context, but do not translate any
of the other text. Do not output anything other than the translation of the indicated part of the text.

<SOURCE_TEXT>
{tagged_text}
</SOURCE_TEXT>

To reiterate, you should translate only this part of the text, shown here again between <TRANSLATE_THIS> and </TRANSLATE_THIS>:
<TRANSLATE_THIS>
{chunk_to_translate}
</TRANSLATE_THIS>

Output only the translation of the portion you are asked to translate, and nothing else."""

_MULTI_CHUNK_REFLECTION_HEADER = """Your task is to carefully read a source text and part of a translation of that text from {source_lang} to {target_lang}, and then give constructive criticism and helpful suggestions for improving the translation."""

_MULTI_CHUNK_REFLECTION = (
    _MULTI_CHUNK_REFLECTION_HEADER + "\n\n" + _MULTI_CHUNK_CONTEXT + "\n\n" + _REFLECTION_CRITERIA
)

_MULTI_CHUNK_REFLECTION_COUNTRY = (
    _MULTI_CHUNK_REFLECTION_HEADER + "\n" + _COUNTRY_STYLE + "\n\n"
    + _MULTI_CHUNK_CONTEXT + "\n\n" + _REFLECTION_CRITERIA
)

_MULTI_CHUNK_IMPROVEMENT = """Your task is to carefully read, then improve, a translation from {source_lang} to {target_lang}, taking into
account a set of expert suggestions and constructive criticisms. Below, the source text, initial translation, and expert suggestions are provided.

""" + _MULTI_CHUNK_CONTEXT + """

The expert translations of the indicated part, delimited below by <EXPERT_SUGGESTIONS> and </EXPERT_SUGGESTIONS>, are as follows:
<EXPERT_SUGGESTIONS>
{reflection_chunk}
</EXPERT_SUGGESTIONS>

Taking into account the expert suggestions rewrite the translation to improve it, paying attention
to whether there are ways to improve the translation's

""" + _IMPROVEMENT_CRITERIA + """

Output only the new translation of the indicated part and nothing else."""


# ============================================================================
# TEMPLATE REGISTRY
# ============================================================================

# Template identifiers
TRANSLATOR_SYSTEM = "translator_system"
REVIEWER_SYSTEM = "reviewer_system"
EDITOR_SYSTEM = "editor_system"
ONE_CHUNK_INITIAL = "one_chunk_initial"
ONE_CHUNK_REFLECTION = "one_chunk_reflection"
ONE_CHUNK_REFLECTION_COUNTRY = "one_chunk_reflection_country"
ONE_CHUNK_IMPROVEMENT = "one_chunk_improvement"
MULTI_CHUNK_INITIAL = "multi_chunk_initial"
MULTI_CHUNK_REFLECTION = "multi_chunk_reflection"
MULTI_CHUNK_REFLECTION_COUNTRY = "multi_chunk_reflection_country"
MULTI_CHUNK_IMPROVEMENT = "multi_chunk_improvement"

TEMPLATES: Dict[str, str] = {
    TRANSLATOR_SYSTEM: _TRANSLATOR_SYSTEM,
    REVIEWER_SYSTEM: _REVIEWER_SYSTEM,
    EDITOR_SYSTEM: _EDITOR_SYSTEM,
    ONE_CHUNK_INITIAL: _ONE_CHUNK_INITIAL,
    ONE_CHUNK_REFLECTION: _ONE_CHUNK_REFLECTION,
    ONE_CHUNK_REFLECTION_COUNTRY: _ONE_CHUNK_REFLECTION_COUNTRY,
    ONE_CHUNK_IMPROVEMENT: _ONE_CHUNK_IMPROVEMENT,
    MULTI_CHUNK_INITIAL: _MULTI_CHUNK_INITIAL,
    MULTI_CHUNK_REFLECTION: _MULTI_CHUNK_REFLECTION,
    MULTI_CHUNK_REFLECTION_COUNTRY: _MULTI_CHUNK_REFLECTION_COUNTRY,
    MULTI_CHUNK_IMPROVEMENT: _MULTI_CHUNK_IMPROVEMENT,
}


def render_template(template_id: str, variables: Mapping[str, str],
                    templates: Mapping[str, str] = TEMPLATES) -> str:
    """
    Render a template by named-placeholder substitution.

    Values are inserted verbatim; braces inside values are not interpreted.

    Args:
        template_id: Key into templates
        variables: Placeholder values
        templates: Template registry (defaults to the built-in prompts)

    Returns:
        str: Rendered text

    Raises:
        TemplateError: Unknown template id, missing variable, or malformed template
    """
    template = templates.get(template_id)
    if template is None:
        raise TemplateError(f"Unknown template '{template_id}'", template_id=template_id)

    try:
        return template.format_map(dict(variables))
    except KeyError as e:
        raise TemplateError(
            f"Missing template variable {e}",
            template_id=template_id,
            context={'missing': e.args[0] if e.args else None}
        ) from e
    except (ValueError, IndexError, AttributeError) as e:
        raise TemplateError(f"Malformed template: {e}", template_id=template_id) from e


# ============================================================================
# PROMPT FUNCTIONS
# ============================================================================

def _system_variables(source_lang: str, target_lang: str) -> Dict[str, str]:
    return {"source_lang": source_lang, "target_lang": target_lang}


def generate_initial_prompt(
    source_lang: str,
    target_lang: str,
    source_text: str,
) -> PromptPair:
    """First-pass translation of a text that fits in one request."""
    return PromptPair(
        system=render_template(TRANSLATOR_SYSTEM, _system_variables(source_lang, target_lang)),
        user=render_template(ONE_CHUNK_INITIAL, {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "source_text": source_text,
        })
    )


def generate_reflection_prompt(
    source_lang: str,
    target_lang: str,
    source_text: str,
    translation_1: str,
    country: str = "",
) -> PromptPair:
    """
    Critique of a single-unit first-pass translation.

    Args:
        source_lang: Source language name
        target_lang: Target language name
        source_text: Original text
        translation_1: First-pass translation
        country: Optional region hint; switches to the dialect-aware template

    Returns:
        PromptPair: A named tuple with 'system' and 'user' prompts
    """
    variables = {
        "source_lang": source_lang,
        "target_lang": target_lang,
        "source_text": source_text,
        "translation_1": translation_1,
    }
    if country:
        template_id = ONE_CHUNK_REFLECTION_COUNTRY
        variables["country"] = country
    else:
        template_id = ONE_CHUNK_REFLECTION

    return PromptPair(
        system=render_template(REVIEWER_SYSTEM, _system_variables(source_lang, target_lang)),
        user=render_template(template_id, variables)
    )


def generate_improvement_prompt(
    source_lang: str,
    target_lang: str,
    source_text: str,
    translation_1: str,
    reflection: str,
) -> PromptPair:
    """Final edit of a single-unit translation guided by the critique."""
    return PromptPair(
        system=render_template(EDITOR_SYSTEM, _system_variables(source_lang, target_lang)),
        user=render_template(ONE_CHUNK_IMPROVEMENT, {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "source_text": source_text,
            "translation_1": translation_1,
            "reflection": reflection,
        })
    )


def generate_chunk_initial_prompt(
    source_lang: str,
    target_lang: str,
    tagged_text: str,
    chunk_to_translate: str,
) -> PromptPair:
    """
    First-pass translation of one chunk.

    tagged_text is the whole source with the chunk delimited by
    <TRANSLATE_THIS>...</TRANSLATE_THIS>; the rest is context only.
    """
    return PromptPair(
        system=render_template(TRANSLATOR_SYSTEM, _system_variables(source_lang, target_lang)),
        user=render_template(MULTI_CHUNK_INITIAL, {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "tagged_text": tagged_text,
            "chunk_to_translate": chunk_to_translate,
        })
    )


def generate_chunk_reflection_prompt(
    source_lang: str,
    target_lang: str,
    tagged_text: str,
    chunk_to_translate: str,
    translation_1_chunk: str,
    country: str = "",
) -> PromptPair:
    """Critique of one chunk's first-pass translation, with whole-text context."""
    variables = {
        "source_lang": source_lang,
        "target_lang": target_lang,
        "tagged_text": tagged_text,
        "chunk_to_translate": chunk_to_translate,
        "translation_1_chunk": translation_1_chunk,
    }
    if country:
        template_id = MULTI_CHUNK_REFLECTION_COUNTRY
        variables["country"] = country
    else:
        template_id = MULTI_CHUNK_REFLECTION

    return PromptPair(
        system=render_template(REVIEWER_SYSTEM, _system_variables(source_lang, target_lang)),
        user=render_template(template_id, variables)
    )


def generate_chunk_improvement_prompt(
    source_lang: str,
    target_lang: str,
    tagged_text: str,
    chunk_to_translate: str,
    translation_1_chunk: str,
    reflection_chunk: str,
) -> PromptPair:
    """Final edit of one chunk guided by its critique."""
    return PromptPair(
        system=render_template(EDITOR_SYSTEM, _system_variables(source_lang, target_lang)),
        user=render_template(MULTI_CHUNK_IMPROVEMENT, {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "tagged_text": tagged_text,
            "chunk_to_translate": chunk_to_translate,
            "translation_1_chunk": translation_1_chunk,
            "reflection_chunk": reflection_chunk,
        })
    )
