import pickle

from zonecal import Date, DateResolver, resolve_date


def test_hash(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(hash, d1)


def test_new(benchmark):
    benchmark(Date, 2020, 8, 24)


def test_format_common_iso(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(d1.format_common_iso)


def test_add_months(benchmark):
    d1 = Date(2020, 1, 31)
    benchmark(d1.add_months, 13)


def test_add_years(benchmark):
    d1 = Date(2020, 2, 29)
    benchmark(d1.add_years, 3)


def test_replace_lenient(benchmark):
    d1 = Date(2023, 1, 31)
    benchmark(d1.replace, month=2, resolver=DateResolver.PART_LENIENT)


def test_resolve_strict(benchmark):
    benchmark(resolve_date, DateResolver.STRICT, 2023, 2, 29)


def test_resolve_next_valid(benchmark):
    benchmark(resolve_date, DateResolver.NEXT_VALID, 2023, 12, 31)


def test_attributes(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(lambda: d1.year)


def test_pickle(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(pickle.dumps, d1)
