"""
Post-install guidance shown to the user
"""

from pathlib import Path
from typing import List, Optional

from ..constants import DOCS_URL
from ..options import ResolvedOptions
from ..platform import Platform

GETTING_STARTED = """\
Thanks for installing Sunshine!

To get started, review the documentation at:
  {docs_url}
"""

LINUX_POSTINST = """\
ATTENTION: To complete installation, you must run the following command:
`sudo {postinst}`
"""

MACOS_LIMITATIONS = """\
Sunshine can only access microphones on macOS due to system limitations.
To stream system audio use "Soundflower" or "BlackHole".

Gamepads are not currently supported on macOS.
"""


class CaveatReporter:
    """Builds the caveat text blocks for a finished install"""

    def __init__(self, install_dir: Path, docs_url: str = DOCS_URL):
        self.install_dir = Path(install_dir)
        self.docs_url = docs_url

    def report(self, platform: Platform, resolved: Optional[ResolvedOptions] = None) -> List[str]:
        """
        Produce the caveat blocks in display order

        Args:
            platform: Run platform
            resolved: Resolved options of the run; no block depends on them today

        Returns:
            Getting-started block followed by the platform block
        """
        blocks = [GETTING_STARTED.format(docs_url=self.docs_url)]
        if platform.is_linux:
            blocks.append(LINUX_POSTINST.format(postinst=self.install_dir / "bin" / "postinst"))
        elif platform.is_macos:
            blocks.append(MACOS_LIMITATIONS)
        return blocks

    def render(self, platform: Platform, resolved: Optional[ResolvedOptions] = None) -> str:
        return "\n".join(self.report(platform, resolved))


__all__ = ["CaveatReporter"]
