from pathlib import Path

import numpy as np
import pandas as pd
from openpyxl import load_workbook

from smval.core.types import MetricsResult, TCAResult
from smval.reporting.tables import metrics_to_frame, tca_columns, tca_to_frame, write_table


def _tca_result() -> TCAResult:
    res = TCAResult.empty(2)
    res.err_var[0] = [0.01, 0.02, 0.03]
    res.snr_db[0] = [6.0, 3.0, 1.2]
    res.fmse[0] = [0.2, 0.33, 0.43]
    res.corr[0] = [0.8, 0.7, 0.6, 1e-5, 2e-5, 3e-5]
    res.valid_obs[0] = 150
    return res


def test_metrics_columns_and_defaults():
    df = metrics_to_frame(MetricsResult.empty(3))
    assert list(df.columns) == ["R", "Bias", "RMSE", "ubRMSE", "PValue", "N"]
    assert df["N"].tolist() == [0, 0, 0]
    assert df["R"].isna().all()


def test_tca_columns_follow_dataset_names():
    cols = tca_columns(["SMAP", "ASCAT", "ERA5"])
    assert cols[:3] == ["ErrorVar_SMAP", "ErrorVar_ASCAT", "ErrorVar_ERA5"]
    assert cols[3:9] == ["SNRdB_SMAP", "SNRdB_ASCAT", "SNRdB_ERA5", "fMSE_SMAP", "fMSE_ASCAT", "fMSE_ERA5"]
    assert cols[9:] == ["Corr_R12", "Corr_R13", "Corr_R23", "Corr_P12", "Corr_P13", "Corr_P23", "ValidObs"]


def test_tca_frame_values():
    df = tca_to_frame(_tca_result(), ["A", "B", "C"])
    assert df.shape == (2, 16)
    assert df.loc[0, "ErrorVar_B"] == 0.02
    assert df.loc[0, "ValidObs"] == 150
    assert df.iloc[1].isna().all()


def test_xlsx_export_marks_undefined_cells(tmp_path: Path):
    df = tca_to_frame(_tca_result(), ["A", "B", "C"])
    path = write_table(df, tmp_path / "out.xlsx")
    ws = load_workbook(path)["results"]
    header = [cell.value for cell in ws[1]]
    assert header == list(df.columns)
    assert ws.cell(row=2, column=1).value == 0.01
    assert all(cell.value == "NaN" for cell in ws[3])


def test_text_exports_use_marker(tmp_path: Path):
    df = metrics_to_frame(MetricsResult.empty(2))
    txt = write_table(df, tmp_path / "out.txt")
    lines = txt.read_text(encoding="utf-8").splitlines()
    assert lines[0].split("\t") == ["R", "Bias", "RMSE", "ubRMSE", "PValue", "N"]
    assert lines[1].split("\t") == ["NaN", "NaN", "NaN", "NaN", "NaN", "0"]

    csv = write_table(df, tmp_path / "out.csv", na_rep="NA")
    assert csv.read_text(encoding="utf-8").splitlines()[1] == "NA,NA,NA,NA,NA,0"


def test_parquet_keeps_typed_nan(tmp_path: Path):
    df = tca_to_frame(_tca_result(), ["A", "B", "C"])
    path = write_table(df, tmp_path / "out.parquet")
    back = pd.read_parquet(path)
    assert np.isnan(back.loc[1, "ErrorVar_A"])


def test_unknown_suffix_raises(tmp_path: Path):
    try:
        write_table(pd.DataFrame({"a": [1]}), tmp_path / "out.json")
        assert False
    except ValueError as exc:
        assert "Unsupported" in str(exc)


def test_tca_valid_obs_exports_as_integer(tmp_path: Path):
    df = tca_to_frame(_tca_result(), ["A", "B", "C"])
    assert str(df["ValidObs"].dtype) == "Int64"
    txt = write_table(df, tmp_path / "tca.txt")
    rows = [line.split("\t") for line in txt.read_text(encoding="utf-8").splitlines()]
    assert rows[1][-1] == "150"
    assert rows[2][-1] == "NaN"

    ws = load_workbook(write_table(df, tmp_path / "tca.xlsx"))["results"]
    assert ws.cell(row=2, column=16).value == 150
    assert ws.cell(row=3, column=16).value == "NaN"
