import numpy as np
import pandas as pd
import pytest


def make_snapshots(n: int = 400, seed: int = 0) -> pd.DataFrame:
    """Synthetic 10-minute snapshots with the same 40 columns as the real table."""
    rng = np.random.default_rng(seed)

    def side(first_blood, dragons, heralds):
        kills = rng.poisson(6, n)
        assists = kills + rng.poisson(1, n)
        towers = rng.binomial(1, 0.05, n)
        minions = rng.normal(216, 20, n).round().astype(int)
        jungle = rng.normal(50, 9, n).round().astype(int)
        gold = (
            14000 + 300 * kills + 100 * assists + 20 * minions
            + 450 * towers + rng.normal(0, 600, n)
        ).round().astype(int)
        level = np.round(6.8 + 0.04 * kills + rng.normal(0, 0.25, n), 1)
        experience = (level * 2600 + rng.normal(0, 300, n)).round().astype(int)
        return {
            "WardsPlaced": rng.poisson(22, n),
            "WardsDestroyed": rng.poisson(3, n),
            "FirstBlood": first_blood,
            "Kills": kills,
            "Assists": assists,
            "EliteMonsters": dragons + heralds,
            "Dragons": dragons,
            "Heralds": heralds,
            "TowersDestroyed": towers,
            "TotalGold": gold,
            "AvgLevel": level,
            "TotalExperience": experience,
            "TotalMinionsKilled": minions,
            "TotalJungleMinionsKilled": jungle,
            "CSPerMin": minions / 10.0,
            "GoldPerMin": gold / 10.0,
        }

    blue_first_blood = rng.integers(0, 2, n)
    blue_dragons = rng.integers(0, 2, n)
    red_dragons = (1 - blue_dragons) * rng.integers(0, 2, n)
    blue_heralds = rng.binomial(1, 0.2, n)
    red_heralds = (1 - blue_heralds) * rng.binomial(1, 0.2, n)

    blue = side(blue_first_blood, blue_dragons, blue_heralds)
    red = side(1 - blue_first_blood, red_dragons, red_heralds)

    gold_diff = blue["TotalGold"] - red["TotalGold"]
    exp_diff = blue["TotalExperience"] - red["TotalExperience"]
    blue_wins = (gold_diff / 1500 + rng.normal(0, 1, n) > 0).astype(int)

    data = {"gameId": 4_500_000_000 + np.arange(n), "blueWins": blue_wins}
    for prefix, stats, diffs in (
        ("blue", blue, (gold_diff, exp_diff)),
        ("red", red, (-gold_diff, -exp_diff)),
    ):
        opponent = red if prefix == "blue" else blue
        for key in (
            "WardsPlaced", "WardsDestroyed", "FirstBlood", "Kills",
        ):
            data[f"{prefix}{key}"] = stats[key]
        data[f"{prefix}Deaths"] = opponent["Kills"]
        for key in (
            "Assists", "EliteMonsters", "Dragons", "Heralds", "TowersDestroyed",
            "TotalGold", "AvgLevel", "TotalExperience", "TotalMinionsKilled",
            "TotalJungleMinionsKilled",
        ):
            data[f"{prefix}{key}"] = stats[key]
        data[f"{prefix}GoldDiff"] = diffs[0]
        data[f"{prefix}ExperienceDiff"] = diffs[1]
        data[f"{prefix}CSPerMin"] = stats["CSPerMin"]
        data[f"{prefix}GoldPerMin"] = stats["GoldPerMin"]

    return pd.DataFrame(data)


@pytest.fixture
def snapshots() -> pd.DataFrame:
    return make_snapshots()


@pytest.fixture
def snapshots_csv(tmp_path, snapshots):
    path = tmp_path / "snapshots.csv"
    snapshots.to_csv(path, index=False)
    return path
