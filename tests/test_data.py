"""Pytest tests for loading and checking the cleaned table."""

import pandas as pd
import pytest

from flu_eda import config
from flu_eda.data import find_project_root, load_data, select_columns


def test_load_projects_to_analysis_columns(flu_csv, flu_df):
    df = load_data(flu_csv)
    assert list(df.columns) == config.ANALYSIS_COLUMNS
    assert len(df) == len(flu_df)
    assert df[config.CONTINUOUS_OUTCOME].dtype == float


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_data(tmp_path / "nope.csv")


def test_missing_column(tmp_path, flu_df):
    path = tmp_path / "flu.csv"
    flu_df.drop(columns=["MyalgiaYN"]).to_csv(path, index=False)
    with pytest.raises(KeyError, match="MyalgiaYN"):
        load_data(path)


def test_missing_values(tmp_path, flu_df):
    path = tmp_path / "flu.csv"
    flu_df.loc[3, "CoughYN"] = None
    flu_df.to_csv(path, index=False)
    with pytest.raises(ValueError, match="Missing values"):
        load_data(path)


def test_unexpected_category(tmp_path, flu_df):
    path = tmp_path / "flu.csv"
    flu_df.loc[3, "Nausea"] = "Sometimes"
    flu_df.to_csv(path, index=False)
    with pytest.raises(ValueError, match="Sometimes"):
        load_data(path)


def test_non_numeric_temperature(tmp_path, flu_df):
    path = tmp_path / "flu.csv"
    flu_df["BodyTemp"] = flu_df["BodyTemp"].astype(object)
    flu_df.loc[0, "BodyTemp"] = "hot"
    flu_df.to_csv(path, index=False)
    with pytest.raises(ValueError, match="non-numeric"):
        load_data(path)


def test_select_columns_keeps_order():
    df = pd.DataFrame({"a": [1], "b": [2], "c": [3]})
    assert list(select_columns(df, ["c", "a"]).columns) == ["c", "a"]


def test_find_project_root(tmp_path):
    (tmp_path / "data").mkdir()
    nested = tmp_path / "x" / "y"
    nested.mkdir(parents=True)
    assert find_project_root(nested) == tmp_path.resolve()


def test_find_project_root_fails_without_data_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_project_root(tmp_path, marker="definitely-not-here")


def test_infinite_temperature(tmp_path, flu_df):
    path = tmp_path / "flu.csv"
    flu_df.loc[5, "BodyTemp"] = float("inf")
    flu_df.to_csv(path, index=False)
    with pytest.raises(ValueError, match="infinite"):
        load_data(path)
