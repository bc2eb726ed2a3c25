import pytest

from dfops.core.jobs import (
    InvalidOnDeletePolicy,
    JobConfig,
    OnDeletePolicy,
    RuntimeEnvironment,
    map_on_delete,
    requires_replacement,
    validate_job_name,
)


@pytest.mark.parametrize(
    ("policy", "expected"),
    [("cancel", "JOB_STATE_CANCELLED"), ("drain", "JOB_STATE_DRAINING")],
)
def test_map_on_delete_valid_policies(policy: str, expected: str):
    assert map_on_delete(policy) == expected


def test_map_on_delete_keeps_done_mapping():
    assert map_on_delete("done") == "JOB_STATE_DONE"


@pytest.mark.parametrize("policy", ["pause", "", "CANCEL"])
def test_map_on_delete_rejects_unknown_policy(policy: str):
    with pytest.raises(InvalidOnDeletePolicy, match="on_delete"):
        map_on_delete(policy)


def test_map_on_delete_error_names_bad_value():
    with pytest.raises(ValueError, match="pause"):
        map_on_delete("pause")


@pytest.mark.parametrize("name", ["wordcount", "a", "etl-2024-01", "x9"])
def test_validate_job_name_accepts_valid_names(name: str):
    assert validate_job_name(name) == name


@pytest.mark.parametrize(
    "name",
    ["", "WordCount", "1job", "job-", "job_name", "job name", "-job", "wordcount\n"],
)
def test_validate_job_name_rejects_invalid_names(name: str):
    with pytest.raises(ValueError, match="Invalid Dataflow job name"):
        validate_job_name(name)


def test_job_config_defaults_to_drain():
    config = JobConfig(name="wordcount", template_gcs_path="gs://t/wc")

    assert config.on_delete is OnDeletePolicy.DRAIN
    assert config.parameters == {}
    assert config.environment is None


def test_job_config_rejects_done_as_on_delete():
    with pytest.raises(InvalidOnDeletePolicy, match="done"):
        JobConfig(name="wordcount", template_gcs_path="gs://t/wc", on_delete="done")


def test_job_config_rejects_non_string_parameters():
    with pytest.raises(ValueError, match="string"):
        JobConfig(
            name="wordcount",
            template_gcs_path="gs://t/wc",
            parameters={"workers": 3},
        )


def test_job_config_requires_template_path():
    with pytest.raises(ValueError, match="template_gcs_path"):
        JobConfig(name="wordcount", template_gcs_path="")


def test_runtime_environment_validation():
    with pytest.raises(ValueError, match="temp_location"):
        RuntimeEnvironment(temp_location="", zone="us-central1-f")
    with pytest.raises(ValueError, match="zone"):
        RuntimeEnvironment(temp_location="gs://b/tmp", zone="")
    with pytest.raises(ValueError, match="max_workers"):
        RuntimeEnvironment(temp_location="gs://b/tmp", zone="z", max_workers=0)


def test_template_request_body_includes_environment():
    config = JobConfig(
        name="wordcount",
        template_gcs_path="gs://dataflow-templates/latest/Word_Count",
        environment=RuntimeEnvironment(
            temp_location="gs://bucket/tmp", zone="us-central1-f", max_workers=5
        ),
        parameters={"inputFile": "gs://in/kinglear.txt"},
    )

    assert config.to_template_request() == {
        "jobName": "wordcount",
        "gcsPath": "gs://dataflow-templates/latest/Word_Count",
        "parameters": {"inputFile": "gs://in/kinglear.txt"},
        "environment": {
            "tempLocation": "gs://bucket/tmp",
            "zone": "us-central1-f",
            "maxWorkers": 5,
        },
    }


def test_template_request_omits_unset_environment_fields():
    config = JobConfig(
        name="wordcount",
        template_gcs_path="gs://t/wc",
        environment=RuntimeEnvironment(temp_location="gs://b/tmp", zone="z"),
    )
    body = config.to_template_request()

    assert "maxWorkers" not in body["environment"]
    assert "environment" not in JobConfig(
        name="wordcount", template_gcs_path="gs://t/wc"
    ).to_template_request()


def test_job_config_from_dict_restores_equal_config():
    config = JobConfig(
        name="wordcount",
        project="my-project",
        template_gcs_path="gs://t/wc",
        environment=RuntimeEnvironment(temp_location="gs://b/tmp", zone="z"),
        parameters={"output": "gs://out"},
        on_delete="cancel",
    )

    assert JobConfig.from_dict(config.to_dict()) == config


def test_requires_replacement_on_any_change():
    base = JobConfig(name="wordcount", template_gcs_path="gs://t/wc")
    same = JobConfig(name="wordcount", template_gcs_path="gs://t/wc")
    cancel = JobConfig(
        name="wordcount", template_gcs_path="gs://t/wc", on_delete="cancel"
    )
    params = JobConfig(
        name="wordcount", template_gcs_path="gs://t/wc", parameters={"a": "b"}
    )

    assert requires_replacement(base, same) is False
    assert requires_replacement(base, cancel) is True
    assert requires_replacement(base, params) is True


def test_job_config_rejects_name_with_trailing_newline():
    with pytest.raises(ValueError, match="Invalid Dataflow job name"):
        JobConfig(name="wordcount\n", template_gcs_path="gs://t/wc")
