import faulthandler

import jax

from twinbench.twinbench import Config, Session, init


def test_session_sets_and_restores_seed_and_flags():
    cfg = Config()
    before_seed = cfg.random_seed
    before_use_jit = cfg.use_jit

    with Session(seed=0, use_jit=True) as c:
        assert c.random_seed == 0
        assert c.use_jit is True
        assert c.backend == "jit"
        key1 = c.random_key
        key2 = c.random_key
        assert not jax.numpy.array_equal(key1, key2)

    # Session should restore prior values
    assert cfg.random_seed == before_seed
    assert cfg.use_jit == before_use_jit


def test_session_can_override_subset_and_restore():
    cfg = Config()
    cfg.set_use_jit(False)
    cfg.set_seed(11)

    with Session(seed=3) as c:
        assert c.random_seed == 3
        # unspecified flags remain unchanged
        assert c.use_jit is False
        assert c.backend == "native"

    assert cfg.random_seed == 11
    assert cfg.use_jit is False


def test_nested_sessions_restore_state():
    cfg = Config()
    cfg.set_use_jit(False)
    cfg.set_seed(5)

    with Session(seed=1) as s1:
        assert s1.random_seed == 1
        with Session(use_jit=True, seed=2) as s2:
            assert s2.use_jit is True
            assert s2.random_seed == 2
        # after inner session, outer session settings remain
        assert s1.use_jit is False
        assert s1.random_seed == 1

    assert cfg.use_jit is False
    assert cfg.random_seed == 5


def test_next_seed_is_reproducible_per_session_seed():
    with Session(seed=42) as c:
        first = [c.next_seed for _ in range(3)]
    with Session(seed=42) as c:
        second = [c.next_seed for _ in range(3)]
    assert first == second
    assert all(0 <= s < 2**32 for s in first)
    assert len(set(first)) == 3


def test_init_returns_open_handle_and_close_restores():
    cfg = Config()
    cfg.set_use_jit(False)
    cfg.set_seed(9)
    was_enabled = faulthandler.is_enabled()

    handle = init(seed=1, use_jit=True, diagnostics=True)
    try:
        assert handle.is_open
        assert handle.config is cfg
        assert cfg.use_jit is True
        assert cfg.random_seed == 1
        assert faulthandler.is_enabled()
    finally:
        handle.close()

    assert not handle.is_open
    assert cfg.use_jit is False
    assert cfg.random_seed == 9
    assert faulthandler.is_enabled() == was_enabled
    # closing twice is harmless
    handle.close()
    assert cfg.random_seed == 9
