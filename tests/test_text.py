from summary_assistant.summarizer.prompts import PromptBuilder, render_system_prompt
from summary_assistant.summarizer.text import count_words, prepare_content


def test_prepare_content_drops_script_style_and_noscript_with_contents():
    raw = (
        "<p>Eerste alinea.</p>"
        "<script type='text/javascript'>var x = 'geheim';</script>"
        "<style>.a { color: red }</style>"
        "<NOSCRIPT>Zet javascript aan</NOSCRIPT>"
        "<p>Tweede alinea.</p>"
    )
    text = prepare_content(raw)
    assert "geheim" not in text
    assert "color" not in text
    assert "javascript" not in text
    assert text == "Eerste alinea.\nTweede alinea."


def test_prepare_content_keeps_block_structure_and_decodes_entities():
    raw = "<h2>Titel</h2><div>Caf&eacute; &amp; bar</div>regel<br/>nieuwe<br>regel<br><ul><li>punt</li></ul>"
    assert prepare_content(raw) == "Titel\nCafé & bar\nregel\nnieuwe\nregel\npunt"


def test_prepare_content_collapses_whitespace():
    raw = "  <p>een   \t twee</p>\n\n\n\n<p>drie</p>  "
    assert prepare_content(raw) == "een twee\n\ndrie"


def test_prepare_content_is_idempotent_on_plain_text():
    once = prepare_content("<p>De  raad   besloot.</p><p>Morgen meer.</p>")
    assert prepare_content(once) == once


def test_count_words_ignores_punctuation_and_surrounding_whitespace():
    text = "  De wethouder - die gisteren sprak - zei: 'nee'!  "
    assert count_words(text) == count_words(text.strip()) == 7


def test_count_words_treats_hyphen_and_apostrophe_words_as_one():
    assert count_words("Een auto-ongeluk op zo'n drukke weg") == 6


def test_count_words_empty():
    assert count_words("") == 0
    assert count_words("   ... --- ") == 0


def test_prompt_builder_substitutes_word_limit_and_keeps_content():
    builder = PromptBuilder("Maximaal %d woorden.")
    system, user = builder.build("Inhoud\nvan het artikel", 120)
    assert system.role == "system"
    assert system.content == "Maximaal 120 woorden."
    assert user.role == "user"
    assert user.content == "Inhoud\nvan het artikel"


def test_blank_template_falls_back_to_default_prompt():
    prompt = render_system_prompt("   ", 80)
    assert "maximaal 80 woorden" in prompt
    assert "Nederlands" in prompt
