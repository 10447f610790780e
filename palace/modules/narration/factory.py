import logging
from typing import Optional

from palace.modules.narration.backends import Pyttsx3Synthesizer, VlcAudioOutput
from palace.modules.narration.engine import Narrator
from palace.modules.narration.network import NetworkMonitor
from palace.modules.narration.remote import RemoteTTSClient

logger = logging.getLogger(__name__)


def create_narrator(access_token: Optional[str] = None, mode: Optional[str] = None,
                    voice: Optional[str] = None, probe: bool = True, **callbacks) -> Narrator:
    """Build a Narrator on pyttsx3 and libVLC.

    Requires the ``narration`` extra. ``callbacks`` are passed through
    (on_start, on_end, on_error, on_notice).
    """
    network = NetworkMonitor()
    if probe:
        network.check()
    narrator = Narrator(
        remote=RemoteTTSClient(access_token=access_token),
        synthesizer=Pyttsx3Synthesizer(),
        output=VlcAudioOutput(),
        network=network,
        mode=mode,
        voice=voice,
        **callbacks,
    )
    logger.info(f"Narrator ready in {narrator.mode} mode, network {network.status}")
    return narrator
