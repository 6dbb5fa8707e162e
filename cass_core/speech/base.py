"""语音协作方的边界协议。

核心逻辑不实现语音识别或合成，只在这些协议上触发副作用：

- SpeechSynthesizer: 朗读 CASS 的回复；切换人格时要求立即停止。
- SpeechRecognizer / RecognitionTask: 录音期间持续回调最新的识别文本。
- MicrophonePermission: 麦克风授权开关，录音前只读取它。

SpeechNotifier 把会话事件桥接到 SpeechSynthesizer。
"""

from typing import Callable, Protocol

from cass_core.domain.models import Message
from cass_core.infrastructure.logging.logger import logger
from cass_core.personalities.registry import Personality, VoiceProfile, get_profile


class SpeechSynthesizer(Protocol):
    def speak(self, text: str, voice: VoiceProfile) -> None:
        ...

    def stop(self) -> None:
        ...


class RecognitionTask(Protocol):
    def cancel(self) -> None:
        ...


class SpeechRecognizer(Protocol):
    @property
    def is_available(self) -> bool:
        ...

    def start(self, on_transcript: Callable[[str], None]) -> RecognitionTask:
        ...


class MicrophonePermission(Protocol):
    @property
    def authorized(self) -> bool:
        ...


class LoggingSynthesizer:
    """没有接入真实 TTS 时的默认实现，只把要朗读的内容写入日志。"""

    def speak(self, text: str, voice: VoiceProfile) -> None:
        logger.info(
            "Speak",
            extra={"extra": {"text": text, "locale": voice.locale, "rate": voice.rate, "pitch": voice.pitch}},
        )

    def stop(self) -> None:
        logger.info("Stop speaking")


class SpeechNotifier:
    """会话事件 -> 语音播报。"""

    def __init__(self, synthesizer: SpeechSynthesizer):
        self._synthesizer = synthesizer

    def assistant_message_added(self, message: Message, personality: Personality) -> None:
        self._synthesizer.speak(message.content, get_profile(personality).voice)

    def personality_switched(self, personality: Personality) -> None:
        self._synthesizer.stop()
