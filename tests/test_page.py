import pytest

from userdata.fallback import LiteralFallback, TextSubstitution
from userdata.hooks import install_user_variables_hook, update_script_variable
from userdata.page import Page


def test_page_from_html_is_ready():
    page = Page.from_html("<p>hi</p>")
    assert page.ready
    assert page.render() == "<p>hi</p>"


def test_when_ready_runs_immediately_on_parsed_page():
    page = Page.from_html("<p>hi</p>")
    seen = []
    page.when_ready(seen.append)
    assert seen == [page]


def test_when_ready_defers_until_close_and_fires_once():
    page = Page()
    seen = []
    page.when_ready(seen.append)

    page.feed("<p>")
    page.feed(b"hi</p>")
    assert seen == []

    page.close()
    page.close()
    assert seen == [page]


def test_feed_after_close_rejected():
    page = Page.from_html("<p></p>")
    with pytest.raises(RuntimeError):
        page.feed("<p></p>")


def test_render_before_close_rejected():
    with pytest.raises(RuntimeError):
        Page().render()


def test_set_content_on_input_and_text_elements():
    page = Page.from_html('<input id="a" value="old"><span id="b">old <b>x</b></span>')
    page.set_content(page.get_element_by_id("a"), "new")
    page.set_content(page.get_element_by_id("b"), "new")
    assert page.get_element_by_id("a")["value"] == "new"
    assert page.get_element_by_id("b").decode_contents() == "new"


def test_replace_text_first_occurrence_per_node_only():
    page = Page.from_html("<body><p>a Silvio b Silvio</p><p>Silvio</p></body>")
    assert page.replace_text("Silvio", "Maria") == 2
    texts = [p.get_text() for p in page.select("p")]
    assert texts == ["a Maria b Silvio", "Maria"]


def test_replace_text_ignores_comments_and_head():
    page = Page.from_html(
        "<html><head><title>Olá, Silvio!</title></head>"
        "<body><!-- Olá, Silvio! --><p>Olá, Silvio!</p></body></html>"
    )
    page.replace_text("Olá, Silvio!", "Olá, Ana!")
    html = page.render()
    assert "<title>Olá, Silvio!</title>" in html
    assert "<!-- Olá, Silvio! -->" in html
    assert "<p>Olá, Ana!</p>" in html


def test_replace_text_without_body_walks_whole_document():
    page = Page.from_html("<div>Consultando dados de Silvio</div>")
    page.replace_text("Silvio", "Ana")
    assert page.render() == "<div>Consultando dados de Ana</div>"


# -------------------------------------------------
# Fallback shim
# -------------------------------------------------

def test_literal_fallback_is_a_text_substitution():
    assert isinstance(LiteralFallback(), TextSubstitution)


def test_literal_fallback_replaces_only_sample_sentences():
    page = Page.from_html(
        "<body>"
        "<p>Atenção: Silvio, finalize o processo para receber seus valores hoje.</p>"
        "<p>João Silva, revise as informações antes de finalizar o saque</p>"
        "<p>CPF 717.148.209-04 confirmado</p>"
        "<p>Silvio continua aqui</p>"
        "</body>"
    )

    changed = LiteralFallback().apply(page, "Maria", "Maria Souza", "123.456.789-01")

    assert changed == 3
    texts = [p.get_text() for p in page.select("p")]
    assert texts == [
        "Atenção: Maria, finalize o processo para receber seus valores hoje.",
        "Maria Souza, revise as informações antes de finalizar o saque",
        "CPF 123.456.789-01 confirmado",
        "Silvio continua aqui",
    ]


def test_literal_fallback_leaves_sample_cpf_without_cpf():
    page = Page.from_html("<body><p>717.148.209-04</p></body>")
    assert LiteralFallback().apply(page, "Maria", "Maria", None) == 0
    assert page.select("p")[0].get_text() == "717.148.209-04"


# -------------------------------------------------
# Script variable hook
# -------------------------------------------------

def test_update_script_variable_rewrites_declared_variable():
    page = Page.from_html(
        '<body><script>var nomeUsuario = "João Silva"; if (a && b) {}</script></body>'
    )
    assert update_script_variable(page, "nomeUsuario", "Maria Souza")
    html = page.render()
    assert 'var nomeUsuario = "Maria Souza";' in html
    assert "a && b" in html


def test_update_script_variable_single_quotes():
    page = Page.from_html("<script>let nomeUsuario='x';</script>")
    update_script_variable(page, "nomeUsuario", "Ana")
    assert 'let nomeUsuario="Ana";' in page.render()


def test_update_script_variable_ignores_undeclared():
    page = Page.from_html("<script>var outro = 'x';</script>")
    assert not update_script_variable(page, "nomeUsuario", "Ana")
    assert page.render() == "<script>var outro = 'x';</script>"


def test_install_hook_registers_in_environment():
    page = Page.from_html('<script>const nomeUsuario = "x";</script>')
    install_user_variables_hook(page)
    page.environment["updateUserVariables"]("Ana")
    assert 'const nomeUsuario = "Ana";' in page.render()


def test_text_substitution_cannot_be_instantiated():
    with pytest.raises(TypeError):
        TextSubstitution()


# -------------------------------------------------
# Raw-text elements
# -------------------------------------------------

def test_update_script_variable_cannot_close_the_script():
    page = Page.from_html('<body><script>var nomeUsuario = "x";</script></body>')

    update_script_variable(page, "nomeUsuario", "</script><script>alert(1)</script>")

    html = page.render()
    assert "<script>alert(1)</script>" not in html
    assert html.count("</script>") == 1
    assert 'var nomeUsuario = "<\\/script><script>alert(1)<\\/script>";' in html


def test_replace_text_inside_script_escapes_closing_tag():
    page = Page.from_html("<body><script>// Olá, Silvio!\n</script><p>Olá, Silvio!</p></body>")

    page.replace_text("Silvio", "</script><b>x</b>")

    assert str(page.select("script")[0].string) == "// Olá, <\\/script><b>x<\\/b>!\n"
    assert page.select("p")[0].get_text() == "Olá, </script><b>x</b>!"
    assert page.render().count("</script>") == 1


def test_set_content_stringifies_values():
    page = Page.from_html('<input id="a"><span id="b"></span>')
    page.set_content(page.get_element_by_id("a"), 42)
    page.set_content(page.get_element_by_id("b"), 42)
    assert page.get_element_by_id("a")["value"] == "42"
    assert page.get_element_by_id("b").get_text() == "42"


def test_restore_replaces_tree_from_snapshot():
    page = Page.from_html("<p>a</p>")
    before = page.snapshot()
    page.select("p")[0].string = "b"
    page.restore(before)
    assert page.render() == "<p>a</p>"
