"""Test configuration and fixtures for followback tests."""

import json
import logging

import pytest

from followback.models import Config


def canonical_export(key, entries):
    """Build an export in the canonical shape from (value, timestamp) pairs."""
    return {
        key: [
            {
                "title": "",
                "media_list_data": [],
                "string_list_data": [
                    {
                        "href": f"https://www.instagram.com/{value}",
                        "value": value,
                        "timestamp": timestamp,
                    }
                ],
            }
            for value, timestamp in entries
        ]
    }


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def followers_export():
    """Followers export in the canonical shape."""
    return json.dumps(
        canonical_export(
            "relationships_followers",
            [("alice", 1700000000), ("Bob", 1700000100), ("carol_", 1700000200)],
        )
    )


@pytest.fixture
def following_export():
    """Following export in the canonical shape."""
    return json.dumps(
        canonical_export(
            "relationships_following",
            [("alice", 1690000000), ("dave.x", 1690000100), ("eve", 1690000200)],
        )
    )


@pytest.fixture
def following_html():
    """An exported following page with profile links and page chrome."""
    return """
    <html>
      <head><title>Following</title><script>document.write("x")</script></head>
      <body>
        <a href="https://www.instagram.com/">instagram.com</a>
        <div class="list">
          <div><a href="https://www.instagram.com/alice" target="_blank">alice</a></div>
          <div><a href="https://www.instagram.com/Dave.X/">dave.x</a></div>
          <div><a href="https://www.instagram.com/eve?hl=en">eve</a></div>
          <div><a href="https://www.instagram.com/alice">alice again</a></div>
        </div>
        <a href="/privacy">Privacy</a>
      </body>
    </html>
    """


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Restore root logger handlers after tests that call setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
