"""
Browser Identity
================
Coherent browser fingerprints for anonymous requests.

User-Agent, Sec-Ch-Ua, platform and the curl_cffi TLS impersonation
key must agree with each other, otherwise the upstream rejects the
request outright. One identity is picked per transport and never
mutated afterwards.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class BrowserIdentity:
    """
    Complete browser identity.
    All headers must be consistent with each other.
    """
    user_agent: str
    sec_ch_ua: str
    sec_ch_ua_mobile: str
    sec_ch_ua_platform: str
    accept_language: str
    impersonation: str  # curl_cffi impersonation key

    def base_headers(self) -> Dict[str, str]:
        """Headers every request carries."""
        return {
            "user-agent": self.user_agent,
            "accept-language": self.accept_language,
            "sec-ch-ua": self.sec_ch_ua,
            "sec-ch-ua-mobile": self.sec_ch_ua_mobile,
            "sec-ch-ua-platform": self.sec_ch_ua_platform,
        }


# ──────────────────────────────────────────────────────────
# Coherent browser profiles
# impersonation must match curl_cffi's TLS fingerprint
# ──────────────────────────────────────────────────────────
BROWSER_PROFILES: List[Dict] = [
    {
        "ua": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/136.0.0.0 Safari/537.36",
        "sec_ch_ua": '"Chromium";v="136", "Not A Brand";v="99", "Google Chrome";v="136"',
        "platform": "Windows",
        "impersonation": "chrome136",
    },
    {
        "ua": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/136.0.0.0 Safari/537.36",
        "sec_ch_ua": '"Chromium";v="136", "Not A Brand";v="99", "Google Chrome";v="136"',
        "platform": "macOS",
        "impersonation": "chrome136",
    },
    {
        "ua": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        "sec_ch_ua": '"Google Chrome";v="131", "Chromium";v="131", "Not_A Brand";v="24"',
        "platform": "Windows",
        "impersonation": "chrome131",
    },
    {
        "ua": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        "sec_ch_ua": '"Google Chrome";v="131", "Chromium";v="131", "Not_A Brand";v="24"',
        "platform": "Linux",
        "impersonation": "chrome131",
    },
]

ACCEPT_LANGUAGES = [
    "en-US,en;q=0.9",
    "en-GB,en;q=0.9,en-US;q=0.8",
    "en,en-US;q=0.9",
]


def pick_identity(rng: Optional[random.Random] = None) -> BrowserIdentity:
    """Pick a random coherent browser identity."""
    rng = rng or random
    profile = rng.choice(BROWSER_PROFILES)
    return BrowserIdentity(
        user_agent=profile["ua"],
        sec_ch_ua=profile["sec_ch_ua"],
        sec_ch_ua_mobile="?0",
        sec_ch_ua_platform=f'"{profile["platform"]}"',
        accept_language=rng.choice(ACCEPT_LANGUAGES),
        impersonation=profile["impersonation"],
    )
