import json
from pathlib import Path

import jsonschema
import pytest
import yaml

import grocer

PKG = Path(grocer.__file__).resolve().parent
SCHEMAS = PKG / "schemas"
RULES = PKG / "rules"


@pytest.mark.parametrize("name", ["period.schema.json", "coupon_policy.schema.json"])
def test_schema_is_valid(name):
    schema = json.loads((SCHEMAS / name).read_text(encoding="utf-8"))
    jsonschema.Draft202012Validator.check_schema(schema)


@pytest.mark.parametrize(
    "schema_name, doc",
    [
        ("coupon_policy.schema.json", RULES / "coupon_policy.yaml"),
        ("period.schema.json", RULES / "periods" / "normal.yaml"),
    ],
)
def test_bundled_rules_match_schema(schema_name, doc):
    schema = json.loads((SCHEMAS / schema_name).read_text(encoding="utf-8"))
    raw = yaml.safe_load(doc.read_text(encoding="utf-8"))
    jsonschema.Draft202012Validator(schema).validate(raw)


def test_policy_schema_rejects_lowercase_code():
    schema = json.loads((SCHEMAS / "coupon_policy.schema.json").read_text(encoding="utf-8"))
    bad = {"policyVersion": "x", "coupons": {"a10": {"type": "percentage_off"}}}
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance=bad, schema=schema)


def test_period_schema_rejects_unknown_product():
    schema = json.loads((SCHEMAS / "period.schema.json").read_text(encoding="utf-8"))
    bad = {"name": "x", "unitPrices": {"CHERRY": 900}}
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance=bad, schema=schema)
