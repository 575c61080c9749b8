from notemanager.utils import auth_hash


def test_hash_and_verify():
    pw = "correct horse battery staple"
    h = auth_hash.hash_password(pw)
    assert isinstance(h, str) and h != pw
    assert auth_hash.verify_password(pw, h) is True


def test_wrong_password_fails():
    h = auth_hash.hash_password("s3cret")
    assert auth_hash.verify_password("wrong", h) is False


def test_salted_hashes_differ():
    h1 = auth_hash.hash_password("repeatable")
    h2 = auth_hash.hash_password("repeatable")
    assert h1 != h2
    assert auth_hash.verify_password("repeatable", h1)
    assert auth_hash.verify_password("repeatable", h2)


def test_garbage_hash_never_matches():
    assert auth_hash.verify_password("anything", "not-a-hash") is False
    assert auth_hash.verify_password(None, "not-a-hash") is False


def test_explicit_rounds_still_verify():
    ctx = auth_hash._build_context(5)
    h = ctx.hash("rounds")
    assert ctx.verify("rounds", h)
    assert not ctx.verify("other", h)
