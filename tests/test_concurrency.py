"""Tests for one cart shared between threads."""
import os
import threading
import time

from checkout_tool.engine import Checkout
from checkout_tool.engine.locking import ReadWriteLock


def run_threads(target, count):
    threads = [threading.Thread(target=target) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert not any(t.is_alive() for t in threads), "worker threads did not finish"


def test_concurrent_scans_are_not_lost(rules_file):
    co = Checkout(rules_file)

    def worker():
        for _ in range(25):
            co.scan('C')

    run_threads(worker, 8)

    assert co.quantities() == {'C': 200}
    assert co.get_total_price() == 200 * 20


def test_totals_during_rule_rewrites_are_consistent(rules_file, write_rules):
    """Every total is priced against one complete rule file, old or new."""
    co = Checkout(rules_file)
    for _ in range(3):
        co.scan('A')

    plain = """
        items:
          - sku: "A"
            unit_price: 50
    """
    special = """
        items:
          - sku: "A"
            unit_price: 50
            special_price:
              count: 3
              price: 130
    """
    seen = []
    stop = threading.Event()

    def reader():
        while True:
            seen.append(co.get_total_price())
            if stop.is_set():
                break

    def writer():
        staging = rules_file.with_suffix(".tmp")
        for i in range(20):
            write_rules(staging, plain if i % 2 else special)
            os.replace(staging, rules_file)
        stop.set()

    threads = [threading.Thread(target=reader) for _ in range(4)]
    threads.append(threading.Thread(target=writer))
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert seen
    assert set(seen) <= {150, 130}


def test_read_lock_allows_concurrent_readers():
    lock = ReadWriteLock()
    inside = []
    barrier = threading.Barrier(3, timeout=5)

    def reader():
        with lock.read():
            inside.append(1)
            barrier.wait()

    run_threads(reader, 3)
    assert len(inside) == 3


def test_write_lock_excludes_readers():
    lock = ReadWriteLock()
    events = []

    lock.acquire_write()

    def reader():
        with lock.read():
            events.append('read')

    t = threading.Thread(target=reader)
    t.start()
    time.sleep(0.05)
    events.append('write-done')
    lock.release_write()
    t.join(timeout=5)

    assert events == ['write-done', 'read']
