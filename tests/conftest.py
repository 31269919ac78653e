import pytest
from pagedate.core import config

_SETTING_NAMES = (
    "USER_AGENT",
    "MAX_BYTES",
    "FETCH_TIMEOUT_MS",
    "HEAD_TIMEOUT_MS",
    "MAX_CONCURRENCY",
)

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Restore settings that individual tests override"""
    original = {name: getattr(config.settings, name) for name in _SETTING_NAMES}

    yield

    for name, value in original.items():
        setattr(config.settings, name, value)

@pytest.fixture
def article_html():
    """A typical news article head with every kind of date source"""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>City council approves budget</title>
        <meta charset="utf-8">
        <meta property="og:title" content="City council approves budget">
        <meta property="article:published_time" content="2024-03-05T14:30:00Z">
        <meta property="article:modified_time" content="2024-03-06T09:00:00Z">
        <script type="application/ld+json">
        {
            "@context": "https://schema.org",
            "@type": "NewsArticle",
            "headline": "City council approves budget",
            "datePublished": "2024-03-05T09:30:00-05:00",
            "dateModified": "2024-03-06T04:00:00-05:00"
        }
        </script>
    </head>
    <body>
        <article>
            <p class="byline">By Jane Doe <time datetime="2024-03-05">March 5, 2024</time></p>
            <p>The council voted 7-2 on Tuesday night.</p>
        </article>
    </body>
    </html>
    """
