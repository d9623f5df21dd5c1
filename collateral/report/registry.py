"""
Renderer Registry

Explicit map of display host name -> renderer callable.

The core only exposes pure rendering functions; a host display framework
(notebook, table printer, log sink) registers its adapter here instead of
the core reaching into it.

A renderer callable signature:
    fn(batch: CallBatch) -> str
"""

from __future__ import annotations

from typing import Callable, Dict

from collateral.report.display import format_batch
from collateral.report.summary import summary

RendererFn = Callable[..., str]

_REGISTRY: Dict[str, RendererFn] = {}


def register(name: str, fn: RendererFn) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("renderer name must be a non-empty string")
    if not callable(fn):
        raise ValueError(f"renderer for {name} must be callable")
    if name in _REGISTRY:
        raise ValueError(f"renderer already registered: {name}")
    _REGISTRY[name] = fn


def unregister(name: str) -> None:
    _REGISTRY.pop(name, None)


def get(name: str) -> RendererFn:
    _ensure_builtin_renderers()
    return _REGISTRY[name]


def has(name: str) -> bool:
    _ensure_builtin_renderers()
    return name in _REGISTRY


def list_renderers() -> Dict[str, str]:
    _ensure_builtin_renderers()
    out: Dict[str, str] = {}
    for k, fn in sorted(_REGISTRY.items()):
        doc = (fn.__doc__ or "").strip().splitlines()
        out[k] = doc[0] if doc else ""
    return out


def render(batch, name: str = "text") -> str:
    if not has(name):
        raise KeyError(f"no renderer registered: {name}")
    return _REGISTRY[name](batch)


def _ensure_builtin_renderers() -> None:
    if "text" not in _REGISTRY:
        _REGISTRY["text"] = format_batch
    if "summary" not in _REGISTRY:
        _REGISTRY["summary"] = summary
