import threading
import time

from tokenbind import Container, create_token


def test_concurrent_singleton_inject_constructs_once():
    c = Container()
    token = create_token("slow")
    calls = []

    def make():
        calls.append(threading.get_ident())
        time.sleep(0.01)
        return object()

    c.singleton(token, make)

    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(c.inject(token))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_factory_may_inject_from_same_container():
    c = Container()
    inner = create_token("inner")
    outer = create_token("outer")

    c.singleton(inner, lambda: "inner-value")
    c.singleton(outer, lambda: c.inject(inner) + "!")

    assert c.inject(outer) == "inner-value!"
