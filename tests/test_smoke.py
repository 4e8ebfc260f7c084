from fastapi.testclient import TestClient
from csv_inspector.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_inspect_detects_format():
    raw = "name,city\nPaul,1\nAnne,Montréal\n".encode("utf-8")

    files = {"file": ("test.csv", raw, "text/csv")}
    r = client.post("/inspect", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["failure"] is None
    assert data["format"] == {
        "delimiter": ",",
        "newline": "\n",
        "hasHeaders": True,
        "encoding": "UTF-8",
    }

def test_inspect_with_bom():
    raw = b"\xef\xbb\xbfid;label\r\n1;a\r\n2;b\r\n"

    files = {"file": ("export.CSV", raw, "text/csv")}
    r = client.post("/inspect", files=files, params={"newlines": ["\r\n", "\n"]})
    assert r.status_code == 200

    data = r.json()
    assert data["format"]["delimiter"] == ";"
    assert data["format"]["newline"] == "\r\n"
    assert data["format"]["encoding"] == "UTF-8 with BOM"

def test_inspect_rejects_non_csv_upload():
    files = {"file": ("data.json", b'{"a": 1}', "application/json")}
    r = client.post("/inspect", files=files)
    assert r.status_code == 422
    assert r.json()["detail"] == "Only CSV files are supported"

def test_inspect_reports_failure_reason():
    files = {"file": ("test.csv", b"name,age", "text/csv")}
    r = client.post("/inspect", files=files)
    assert r.status_code == 200
    assert r.json() == {"format": None, "failure": "insufficient_lines"}

def test_inspect_query_overrides():
    files = {"file": ("test.tsv", b"name|age\nJohn|30", "text/plain")}
    r = client.post("/inspect", files=files, params={"delimiters": ["|"], "min_lines": 1})
    assert r.status_code == 200
    assert r.json()["format"]["delimiter"] == "|"

    r = client.post("/inspect", files=files, params={"delimiters": [";"]})
    assert r.json() == {"format": None, "failure": "no_column_structure"}

def test_inspect_invalid_overrides():
    files = {"file": ("test.csv", b"name,age\nJohn,30", "text/csv")}
    r = client.post("/inspect", files=files, params={"sample_size": 0})
    assert r.status_code == 422
