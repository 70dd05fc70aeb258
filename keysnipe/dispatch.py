"""Message handling: filter, extract, and fan redemption out to the worker pool"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .attachments import AttachmentResolver
from .config import Config
from .extractor import MESSAGE_SOURCE, CandidateKey, extract_keys
from .logs import log_error
from .redeemer import KeyRedeemer


@dataclass
class InboundMessage:
    """A chat message as the dispatcher sees it"""
    origin_id: int
    content: str
    attachment_urls: List[str] = field(default_factory=list)


class KeyDispatcher:
    """Turns inbound messages into independent redemption tasks.

    handle() only extracts and submits; it never waits on a task. Tasks run on
    a bounded thread pool, are never joined or cancelled, and don't share any
    state except the credential store.
    """

    def __init__(self, cfg: Config, redeemer: KeyRedeemer, resolver: AttachmentResolver,
                 executor: Optional[ThreadPoolExecutor] = None):
        self.cfg = cfg
        self.redeemer = redeemer
        self.resolver = resolver
        self.executor = executor or ThreadPoolExecutor(
            max_workers=cfg.max_workers, thread_name_prefix="keysnipe"
        )

    def accepts(self, message: InboundMessage) -> bool:
        return message.origin_id in self.cfg.server_ids

    def handle(self, message: InboundMessage) -> int:
        """Dispatch one message and return the number of tasks launched"""
        if not self.accepts(message):
            return 0

        launched = 0

        keys = extract_keys(message.content, self.cfg.key_lengths, self.cfg.strict, self.cfg.ignore_urls)
        candidates = [CandidateKey(key, MESSAGE_SOURCE) for key in keys]
        for batch in self._batches(candidates):
            self._submit(self.redeemer.redeem, batch)
            launched += 1

        if self.cfg.snipe_images:
            for url in message.attachment_urls:
                self._submit(self._redeem_attachment, url)
                launched += 1

        return launched

    def _batches(self, candidates: Sequence[CandidateKey]) -> List[List[CandidateKey]]:
        """All keys together when batching, otherwise one singleton batch per key"""
        if not candidates:
            return []
        if self.cfg.batch_keys:
            return [list(candidates)]
        return [[candidate] for candidate in candidates]

    def _redeem_attachment(self, url: str):
        keys = self.resolver.resolve(url)
        candidates = [CandidateKey(key, url) for key in keys]
        if not candidates:
            return
        if self.cfg.batch_keys:
            self.redeemer.redeem(candidates)
            return
        # Unbatched keys each get their own task, like message text keys
        for batch in self._batches(candidates):
            self._submit(self.redeemer.redeem, batch)

    def _submit(self, fn, *args) -> Future:
        future = self.executor.submit(fn, *args)
        future.add_done_callback(self._report_failure)
        return future

    @staticmethod
    def _report_failure(future: Future):
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            log_error(f"Redemption task crashed: {error!r}")

    def shutdown(self, wait: bool = True):
        """Stop accepting work; optionally wait for in-flight tasks"""
        self.executor.shutdown(wait=wait)
