"""
Stress tests for thread-safety of the timezone cache.

Note this isn't a unit test, because it relies on a clean cache
"""

import sys
import time
from threading import Thread

from zonecal import Discontinuity, LocalDateTime, clear_tzcache, get_tz

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    # Running with GIL enabled can still be useful to compare performance,
    # but be sure to warn that threading hasn't been stress tested.
    print("WARNING: Running with GIL enabled. Threading not stress tested.")


LOCAL_DT = LocalDateTime(2024, 6, 15, 12, 0)
NUM_THREADS = 16
NUM_ITERATIONS = 500
TIMEZONE_SAMPLE = [
    "UTC",
    "America/Guyana",
    "Etc/GMT-11",
    "Europe/Vienna",
    "America/Rainy_River",
    "Asia/Ulaanbaatar",
    "US/Alaska",
    "America/Rankin_Inlet",
    "Arctic/Longyearbyen",
    "Pacific/Bougainville",
    "Africa/Monrovia",
    "Europe/Copenhagen",
    "America/Hermosillo",
    "Africa/Brazzaville",
    "Asia/Tashkent",
    "Pacific/Saipan",
    "Europe/Tallinn",
    "UTC+05:30",
    "Africa/Nairobi",
    "America/Argentina/Ushuaia",
    "Brazil/Acre",
]
assert (
    len(TIMEZONE_SAMPLE) % NUM_THREADS
), "Timezone sample should not be evenly divisible by number of threads"
TZS = TIMEZONE_SAMPLE * (NUM_THREADS * NUM_ITERATIONS)


def touch_timezones(tzs):
    """A minimal function that triggers a timezone lookup"""
    for key in tzs:
        info = get_tz(key).get_offset_info(LOCAL_DT)
        assert not isinstance(info, Discontinuity)


def clear_while_loading(tzs):
    """Lookups interleaved with cache clearing"""
    for n, key in enumerate(tzs):
        if n % 50 == 0:
            clear_tzcache(only_keys=[key])
        get_tz(key)


def main(func):
    print(f"Starting test: {func.__name__}")
    threads = []

    start_time = time.time()

    for n in range(NUM_THREADS):
        thread = Thread(target=func, args=(TZS[n::NUM_THREADS],))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    end_time = time.time()
    print(f"Execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main(touch_timezones)
    main(clear_while_loading)
