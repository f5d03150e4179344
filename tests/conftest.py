from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from jinja2 import DictLoader

from internet_timeline.template_engine import TemplateEngine


TEST_TEMPLATES = {
    "hero-stats-template.html": '{% for s in heroStats %}<div class="stat-card">{{ s.title }}</div>{% endfor %}',
    "historical-events-template.html": '{% for e in events %}<div class="event">{{ e.title }}</div>{% endfor %}',
    "statistics-template.html": "{% for s in yearlyStats %}<tr>{{ s.year }}:{{ s.users }}</tr>{% endfor %}",
    "company-template.html": (
        '{% for c in companies %}<div class="company">'
        "{{ c.name }}|{{ c.subscribers }}|{{ c.founded }}|{{ c.keyMilestone }}</div>{% endfor %}"
    ),
    "social-media-template.html": (
        '{% for p in platforms %}<div class="platform">'
        "{{ p.icon }}{{ p.name }}|{{ p.users }}|{{ p.penetration }}|{{ p.note }}</div>{% endfor %}"
    ),
    "policy-template.html": '{% for p in policies %}<div class="policy">{{ p.title }}</div>{% endfor %}',
    "infrastructure-template.html": (
        '{% for i in infrastructure %}<div class="infra">{{ i.name }}'
        "{% for s in i.specifications %}[{{ s.label }}={{ s.value }}]{% endfor %}</div>{% endfor %}"
    ),
    "page-layout.html": "{% for id, html in slots.items() %}<div id=\"{{ id }}\">{{ html | safe }}</div>{% endfor %}",
}


MINIMAL_HISTORICAL: Dict[str, Any] = {
    "heroStats": [
        {"icon": "🌐", "title": "Internet Users", "value": "116M", "description": "Online"},
        {"icon": "📱", "title": "Broadband", "value": "130M", "description": "Mostly mobile"},
        {"icon": "💸", "title": "RAAST", "value": "1B", "description": "Instant payments"},
    ],
    "foundationEra": {
        "events": [
            {"date": "2006", "title": "PTCL Privatization", "description": "Etisalat takes control"},
            {"date": "2009", "title": "Broadband rollout", "description": "DSL expands"},
        ],
        "yearlyStats": [{"year": "2006", "users": "10.5M", "penetration": "6.5%"}],
    },
    "mobileEra": {
        "events": [
            {"date": "2014", "title": "3G/4G Spectrum Auction", "description": "Licences awarded"},
            {"date": "2020", "title": "COVID-19 Digital Shift", "description": "Everything moves online"},
        ],
        "socialMediaGrowth": [{"platform": "Facebook", "users": "43M", "penetration": "19%"}],
    },
    "fintechEra": {
        "events": [{"date": "2021", "title": "RAAST launch", "description": "Instant payments"}],
        "mobileBanking": [{"service": "JazzCash", "users": "16M", "parent": "Jazz", "description": "Wallet"}],
        "investmentBoom": [{"company": "Tag", "funding": "$17M", "type": "Neobank"}],
    },
}


@pytest.fixture
def historical() -> Dict[str, Any]:
    return copy.deepcopy(MINIMAL_HISTORICAL)


def make_engine(templates: Dict[str, str] = TEST_TEMPLATES, compile_all: bool = True) -> TemplateEngine:
    engine = TemplateEngine(DictLoader(templates))
    if compile_all:
        engine.compile_all()
    return engine


@pytest.fixture
def engine() -> TemplateEngine:
    return make_engine()


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(float(delay))


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


def json_site(documents: Dict[str, Any], requests: Optional[List[str]] = None) -> httpx.MockTransport:
    """
    MockTransport serving `documents` (path -> object or raw str) and 404 for anything else.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.lstrip("/")
        if requests is not None:
            requests.append(path)
        if path not in documents:
            return httpx.Response(404)
        body = documents[path]
        text = body if isinstance(body, str) else json.dumps(body)
        return httpx.Response(200, text=text)

    return httpx.MockTransport(handler)


def client_for(transport: httpx.MockTransport) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url="http://test/", transport=transport)
