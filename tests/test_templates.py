from jinja2 import DictLoader

from conftest import TEST_TEMPLATES, make_engine
from internet_timeline.template_engine import (
    REQUIRED_TEMPLATES,
    TEMPLATE_SOURCES,
    TemplateEngine,
    TemplateName,
)


def test_seven_named_sources():
    assert len(TEMPLATE_SOURCES) == 7
    assert TEMPLATE_SOURCES[TemplateName.COMPANIES] == "company-template"


def test_compile_all_makes_engine_ready(engine):
    assert engine.is_ready() is True
    assert engine.get("historicalEvents") is not None
    assert engine.get(TemplateName.POLICIES) is not None


def test_not_ready_until_required_templates_compile():
    engine = make_engine(compile_all=False)
    assert engine.is_ready() is False
    for name in REQUIRED_TEMPLATES[:-1]:
        assert engine.compile(name, TEMPLATE_SOURCES[name]) is True
    assert engine.is_ready() is False
    last = REQUIRED_TEMPLATES[-1]
    assert engine.compile(last, TEMPLATE_SOURCES[last]) is True
    assert engine.is_ready() is True


def test_optional_templates_do_not_gate_readiness():
    templates = {k: v for k, v in TEST_TEMPLATES.items() if k != "policy-template.html"}
    engine = make_engine(templates)
    assert engine.get(TemplateName.POLICIES) is None
    assert engine.is_ready() is True


def test_missing_source_fails_compile():
    engine = TemplateEngine(DictLoader({}))
    assert engine.compile(TemplateName.HERO_STATS, "hero-stats-template") is False
    assert engine.get(TemplateName.HERO_STATS) is None


def test_empty_source_fails_compile():
    engine = TemplateEngine(DictLoader({"hero-stats-template.html": "   \n"}))
    assert engine.compile(TemplateName.HERO_STATS, "hero-stats-template") is False


def test_syntax_error_fails_compile():
    engine = TemplateEngine(DictLoader({"hero-stats-template.html": "{% for x in %}"}))
    assert engine.compile(TemplateName.HERO_STATS, "hero-stats-template") is False


def test_unknown_name_is_rejected():
    engine = make_engine(compile_all=False)
    assert engine.compile("footer", "hero-stats-template") is False
    assert engine.get("footer") is None


def test_packaged_templates_compile_and_escape():
    engine = TemplateEngine()
    results = engine.compile_all()
    assert all(results.values())
    assert engine.is_ready()

    html = engine.get(TemplateName.HISTORICAL_EVENTS).render(
        events=[{"date": "2006", "title": "<b>PTCL</b>", "description": "Sold", "impact": "Big"}]
    )
    assert "&lt;b&gt;PTCL&lt;/b&gt;" in html
    assert "Impact:" in html


def test_packaged_page_layout_has_every_target():
    from internet_timeline.page import Page, Target

    engine = TemplateEngine()
    html = engine.render_page({"slots": Page().as_context()})
    for target in Target:
        assert f'id="{target.value}"' in html


def test_page_to_html_renders_slots_and_extra_context():
    from internet_timeline.page import Page, Target

    engine = make_engine()
    page = Page([Target.HERO_STATS, Target.COVID_IMPACT])
    page.resolve(Target.HERO_STATS).html = '<div class="stat-card">Users</div>'

    html = page.to_html(engine, status={"state": "ready"})
    assert html == (
        '<div id="heroStats"><div class="stat-card">Users</div></div>'
        '<div id="covidImpact"></div>'
    )
