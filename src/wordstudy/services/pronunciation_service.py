"""Pronunciation via the Youdao dictionary voice endpoint."""
import logging
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional

import httpx

from wordstudy import monitoring
from wordstudy.config import settings
from wordstudy.errors import PronunciationError
from wordstudy.models.study_models import Variant

logger = logging.getLogger(__name__)

# Youdao voice types: 1 is UK, 2 is US, 0 is the provider default
VARIANT_TYPES: Dict[Variant, List[int]] = {
    Variant.US: [2, 0, 1],
    Variant.UK: [1, 0, 2],
}

Player = Callable[[str], object]


class YoudaoPronouncer:
    """Plays a word by trying each voice type of a variant in turn."""

    def __init__(self, player: Player, base_url: Optional[str] = None):
        self.player = player
        self.base_url = base_url or settings.pronunciation.base_url

    def candidate_urls(self, word: str, variant: Variant = Variant.US) -> List[str]:
        """Voice URLs in the order they are tried, ending with an untyped one."""
        audio = httpx.QueryParams({"audio": word})
        urls = [f"{self.base_url}?{audio}&type={voice_type}" for voice_type in VARIANT_TYPES[Variant(variant)]]
        urls.append(f"{self.base_url}?{audio}")
        return urls

    def pronounce(self, word: str, variant: Variant = Variant.US) -> bool:
        """Play the word; a failure is logged and reported as False."""
        for url in self.candidate_urls(word, variant):
            try:
                self.player(url)
                logger.debug(f"Pronounced {word!r} from {url}")
                return True
            except (PronunciationError, OSError) as e:
                logger.debug(f"Voice {url} failed for {word!r}: {e}")
        logger.error(f"Could not pronounce {word!r} ({Variant(variant).value})")
        monitoring.pronunciation_failures.inc()
        return False


class AudioDownloader:
    """Player that stores the fetched audio under the pronunciations directory."""

    def __init__(
        self,
        directory: Optional[Path] = None,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.directory = Path(directory or settings.paths.pronunciations_dir)
        self.client = client or httpx.Client(
            timeout=timeout or settings.pronunciation.timeout,
            follow_redirects=True,
        )
        self.saved: List[Path] = []

    @staticmethod
    def _sanitize_filename(text: str) -> str:
        return re.sub(r"[^\w.-]+", "_", text).strip("_") or "audio"

    def __call__(self, url: str) -> Path:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PronunciationError(f"Request failed: {e}") from e

        content_type = response.headers.get("content-type", "")
        if not response.content or not content_type.startswith("audio/"):
            raise PronunciationError(f"No audio in response ({content_type or 'no content type'})")

        query = httpx.URL(url).params
        name = self._sanitize_filename(f"{query.get('audio', 'audio')}-{query.get('type', 'default')}")
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{name}.mp3"
        path.write_bytes(response.content)
        self.saved.append(path)
        logger.info(f"Saved pronunciation to {path}")
        return path

    def close(self) -> None:
        self.client.close()

