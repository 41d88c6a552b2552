import faulthandler
import os
import random
import sys
from typing import Any

import jax
import jax.numpy as jnp


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._random_seed = random.randint(0, sys.maxsize)
            self._key = jax.random.PRNGKey(self._random_seed)
            self._use_jit = False

    def set_seed(self, seed: int) -> None:
        """
        For reproducability one can set a seed for the Monte Carlo kernels
        Parameters
        ----------
        seed: int
            Seed from which per-call seeds are drawn
        """
        self._random_seed = seed
        self._key = jax.random.PRNGKey(seed)

    @property
    def random_seed(self) -> int:
        return self._random_seed

    @property
    def random_key(self) -> jnp.ndarray:
        """
        Splits the current key and returns a new one for random operations
        """
        key, self._key = jax.random.split(self._key)
        return key

    @property
    def next_seed(self) -> int:
        """
        Draws a fresh 32-bit seed, usable by both backends
        """
        return int(jax.random.bits(self.random_key, dtype=jnp.uint32))

    @property
    def use_jit(self) -> bool:
        return self._use_jit

    def set_use_jit(self, use_jit: bool) -> None:
        self._use_jit = bool(use_jit)

    @property
    def backend(self) -> str:
        return "jit" if self._use_jit else "native"


class Session:
    """
    Lightweight context manager to scope Config settings per run.

    Example:
        with Session(seed=0, use_jit=True):
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    A session can also be held open as the library handle returned by
    :func:`init` and released with :meth:`close`.
    """

    def __init__(
        self,
        *,
        seed: int | None = None,
        use_jit: bool | None = None,
        diagnostics: bool = False,
    ) -> None:
        cfg = Config()
        self._prev = {
            "seed": cfg.random_seed,
            "key": cfg._key,  # type: ignore[attr-defined]
            "use_jit": cfg.use_jit,
        }
        self._seed = seed
        self._use_jit = use_jit
        self._diagnostics = diagnostics
        self._enabled_faulthandler = False
        self._open = False
        self._cfg = cfg

    def __enter__(self) -> "Config":
        if self._seed is not None:
            self._cfg.set_seed(self._seed)
        if self._use_jit is not None:
            self._cfg.set_use_jit(self._use_jit)
        if self._diagnostics and not faulthandler.is_enabled():
            faulthandler.enable()
            self._enabled_faulthandler = True
        self._open = True
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def config(self) -> Config:
        return self._cfg

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        if self._enabled_faulthandler:
            faulthandler.disable()
            self._enabled_faulthandler = False
        self._cfg._random_seed = self._prev["seed"]  # type: ignore[attr-defined]
        self._cfg._key = self._prev["key"]  # type: ignore[attr-defined]
        self._cfg.set_use_jit(self._prev["use_jit"])


def init(
    *,
    seed: int | None = None,
    use_jit: bool | None = None,
    diagnostics: bool = True,
    configure_logging: bool = False,
    logging_config: str | os.PathLike | None = None,
) -> Session:
    """
    Explicit one-time setup for a caller that uses the library for a while.

    Returns an open :class:`Session`; the caller keeps it for as long as it
    uses the library and calls ``close()`` (or uses it as a context manager)
    to restore the previous configuration.

    Parameters
    ----------
    seed: int | None
        Seed for the session key
    use_jit: bool | None
        Select the jit backend instead of the native one
    diagnostics: bool
        Dump Python tracebacks on fatal faults inside compiled kernels
    configure_logging: bool
        Load the logging configuration, see
        :func:`twinbench.logging.logging.setup_logging`
    logging_config: str | os.PathLike | None
        Configuration file passed on to ``setup_logging`` when
        ``configure_logging`` is set
    """
    if configure_logging:
        from twinbench.logging.logging import setup_logging

        setup_logging(logging_config)
    session = Session(seed=seed, use_jit=use_jit, diagnostics=diagnostics)
    session.__enter__()
    return session
