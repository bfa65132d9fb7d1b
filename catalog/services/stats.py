"""
Reshaping of aggregation rows into report records.
"""
import math

import pandas as pd

RATIO_DECIMALS = 4

GENRE_COLUMNS = ["genre", "watched", "unwatched", "total", "ratio"]


def genre_watch_ratios(rows):
    """
    Collapse the (genre, watched) rows of ``aggregates.genre_stats`` into one
    record per genre.

    A missing watched flag counts as unwatched. Genres with no documents get
    a NaN ratio.
    """
    data = pd.DataFrame(
        [
            {
                "genre": row["_id"].get("id"),
                "watched": row["_id"].get("watched") is True,
                "count": row["count"],
            }
            for row in rows
        ],
        columns=["genre", "watched", "count"],
    )
    if data.empty:
        return []

    table = data.pivot_table(
        index="genre", columns="watched", values="count", aggfunc="sum", fill_value=0
    ).reindex(columns=[True, False], fill_value=0)

    df = pd.DataFrame({
        "watched": table[True].astype(int),
        "unwatched": table[False].astype(int),
    })
    df["total"] = df["watched"] + df["unwatched"]
    # a zero total becomes NaN before dividing
    df["ratio"] = (df["watched"] / df["total"].where(df["total"] != 0)).round(RATIO_DECIMALS)

    df = df.reset_index().rename(columns={"index": "genre"})
    df = df.sort_values(["total", "genre"], ascending=[False, True], kind="mergesort")

    return [
        {
            "genre": rec["genre"],
            "watched": int(rec["watched"]),
            "unwatched": int(rec["unwatched"]),
            "total": int(rec["total"]),
            "ratio": float(rec["ratio"]),
        }
        for rec in df[GENRE_COLUMNS].to_dict("records")
    ]


def format_ratio(ratio):
    if ratio is None or math.isnan(ratio):
        return "NaN"
    return f"{ratio:.{RATIO_DECIMALS}f}"


def year_histogram(rows):
    return [
        {"year": row["_id"], "count": row["count"]}
        for row in rows
        if row.get("_id")
    ]
