import pytest

from spam_detector import SpamDetector


@pytest.fixture
def detector():
    return SpamDetector()
