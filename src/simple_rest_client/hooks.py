"""Pre, around and post request hooks.

Around hooks are middleware: each receives a ``call_next`` continuation and
the prepared request, and returns the response. The first registered hook is
the outermost one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from .errors import HookError

PreRequestHook = Callable[[requests.PreparedRequest], Any]
AroundRequestHook = Callable[
    [Callable[[], Any], requests.PreparedRequest], Any
]
PostRequestHook = Callable[[Any, requests.PreparedRequest], Any]


class _Continuation:
    """Callable handed to an around hook; runs the inner chain once."""

    def __init__(self, inner: Callable[[], Any], hook: AroundRequestHook):
        self._inner = inner
        self._hook = hook
        self.called = False

    def __call__(self) -> Any:
        if self.called:
            raise HookError(
                f"Around-request hook {self._hook!r} invoked its "
                "continuation more than once"
            )
        self.called = True
        return self._inner()


class HookPipeline:
    """Ordered hook lists wrapped around a single request execution."""

    def __init__(self) -> None:
        self.pre_request_hooks: list[PreRequestHook] = []
        self.around_request_hooks: list[AroundRequestHook] = []
        self.post_request_hooks: list[PostRequestHook] = []

    def add_pre_request_hook(self, hook: PreRequestHook) -> PreRequestHook:
        self.pre_request_hooks.append(hook)
        return hook

    def add_around_request_hook(
        self, hook: AroundRequestHook
    ) -> AroundRequestHook:
        self.around_request_hooks.append(hook)
        return hook

    def add_post_request_hook(self, hook: PostRequestHook) -> PostRequestHook:
        self.post_request_hooks.append(hook)
        return hook

    def _wrap(
        self,
        hook: AroundRequestHook,
        inner: Callable[[], Any],
        request: requests.PreparedRequest,
    ) -> Callable[[], Any]:
        def call() -> Any:
            response = hook(_Continuation(inner, hook), request)
            if response is None:
                raise HookError(
                    f"Around-request hook {hook!r} returned no response"
                )
            return response

        return call

    def run(
        self,
        request: requests.PreparedRequest,
        send: Callable[[requests.PreparedRequest], Any],
    ) -> Any:
        """Execute ``send(request)`` through every registered hook.

        Post hooks only run when the wrapped call returns; an exception
        escaping the around chain skips them.
        """
        for pre_hook in self.pre_request_hooks:
            pre_hook(request)

        def call_next() -> Any:
            return send(request)

        for around_hook in reversed(self.around_request_hooks):
            call_next = self._wrap(around_hook, call_next, request)
        response = call_next()

        for post_hook in self.post_request_hooks:
            post_hook(response, request)
        return response


def log_request(logger: logging.Logger) -> PreRequestHook:
    """Pre hook logging ``"<METHOD> <URI>"`` at INFO."""

    def hook(request: requests.PreparedRequest) -> None:
        logger.info(f"{request.method} {request.url}")

    return hook


def log_failures(logger: logging.Logger) -> AroundRequestHook:
    """Around hook logging any error escaping the request, then re-raising."""

    def hook(
        call_next: Callable[[], Any], request: requests.PreparedRequest
    ) -> Any:
        try:
            return call_next()
        except Exception as exc:
            logger.error(
                f"Failed to {request.method} {request.url}: "
                f"{exc} ({type(exc).__name__})"
            )
            raise

    return hook
