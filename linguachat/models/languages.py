"""Language catalog for typed and spoken input."""

from linguachat.models.schemas import Language

LANGUAGES: tuple[Language, ...] = (
    Language(display_name="English", locale_tag="en-IN"),
    Language(display_name="Kannada", locale_tag="kn-IN"),
    Language(display_name="Hindi", locale_tag="hi-IN"),
    Language(display_name="Malayalam", locale_tag="ml-IN"),
    Language(display_name="Telugu", locale_tag="te-IN"),
    Language(display_name="Tamil", locale_tag="ta-IN"),
)

DEFAULT_LANGUAGE = LANGUAGES[0]


def get_language(locale_tag: str) -> Language:
    """Look up a catalog entry by locale tag.

    Args:
        locale_tag: BCP 47 tag such as ``hi-IN``.

    Returns:
        The matching Language.

    Raises:
        KeyError: If the tag is not in the catalog.
    """
    for language in LANGUAGES:
        if language.locale_tag == locale_tag:
            return language
    raise KeyError(f"Unknown locale tag: {locale_tag}")
