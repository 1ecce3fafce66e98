"""
Unit tests for batch options.
"""

import pytest
from pydantic import ValidationError

from batch_process import BackoffStrategy, BatchOptions, InvalidConfigurationError, RetryPolicy, resolve_options
from telemetry.resilience import RetryConfig

ENV_VARS = [
    "BATCH_SIZE",
    "BATCH_DELAY_BETWEEN_BATCHES",
    "BATCH_CONTINUE_ON_ERROR",
    "BATCH_FLATTEN",
    "BATCH_TIMEOUT",
    "BATCH_RETRY_MAX_ATTEMPTS",
    "BATCH_RETRY_BACKOFF",
    "BATCH_RETRY_INITIAL_DELAY",
    "BATCH_RETRY_MAX_DELAY",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any .env file"""
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        # setenv first so teardown also removes values loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestBatchOptions:
    """Test option defaults and validation"""

    def test_defaults(self):
        """Test defaults of a run without options"""
        options = BatchOptions()

        assert options.batch_size == 1
        assert options.delay_between_batches == 0.0
        assert options.continue_on_error is False
        assert options.flatten is False
        assert options.timeout is None
        assert options.on_progress is None
        assert options.retry.max_attempts == 1
        assert options.retry.backoff is BackoffStrategy.LINEAR
        assert options.retry.initial_delay == 0.1
        assert options.retry.max_delay == 30.0

    @pytest.mark.parametrize("batch_size", [0, -5, 2.5, "3", True])
    def test_invalid_batch_size(self, batch_size):
        """Test a bad batch size raises InvalidConfigurationError, not a pydantic error"""
        with pytest.raises(InvalidConfigurationError) as exc_info:
            BatchOptions(batch_size=batch_size)

        assert exc_info.value.field == "batch_size"

    def test_negative_delay_rejected(self):
        """Test negative pauses are rejected"""
        with pytest.raises(ValidationError):
            BatchOptions(delay_between_batches=-1)

    def test_non_positive_timeout_rejected(self):
        """Test a zero timeout is rejected"""
        with pytest.raises(ValidationError):
            BatchOptions(timeout=0)

    def test_progress_must_be_callable(self):
        """Test on_progress only accepts callables"""
        with pytest.raises(ValidationError):
            BatchOptions(on_progress="print")

    def test_retry_from_dict(self):
        """Test nested retry settings can be given as a dict"""
        options = BatchOptions(retry={"max_attempts": 4, "backoff": "exponential"})

        assert options.retry == RetryPolicy(max_attempts=4, backoff=BackoffStrategy.EXPONENTIAL)

    @pytest.mark.parametrize("max_attempts, expected", [(-2, 1), (0, 1), (1, 1), (6, 6)])
    def test_attempts_normalised(self, max_attempts, expected):
        """Test attempts below one are treated as one"""
        assert RetryPolicy(max_attempts=max_attempts).max_attempts == expected

    def test_to_retry_config(self):
        """Test conversion to the retry loop's settings"""
        policy = RetryPolicy(max_attempts=3, backoff="exponential", initial_delay=0.5, max_delay=2)

        assert policy.to_retry_config() == RetryConfig(
            max_attempts=3,
            initial_delay=0.5,
            max_delay=2.0,
            backoff=BackoffStrategy.EXPONENTIAL,
        )


class TestResolveOptions:
    """Test merging of keyword overrides"""

    def test_defaults_when_nothing_given(self):
        """Test a fresh default options object is built per call"""
        first = resolve_options()
        second = resolve_options()

        assert first == BatchOptions()
        assert first is not second

    def test_options_returned_without_overrides(self):
        """Test options are used as is when there is nothing to merge"""
        options = BatchOptions(batch_size=4)

        assert resolve_options(options) is options

    def test_overrides_win(self):
        """Test keyword overrides replace fields and leave the input untouched"""
        options = BatchOptions(batch_size=4, flatten=True)
        merged = resolve_options(options, batch_size=2)

        assert merged.batch_size == 2
        assert merged.flatten is True
        assert options.batch_size == 4

    def test_overrides_are_validated(self):
        """Test a bad override is caught like a bad option"""
        with pytest.raises(InvalidConfigurationError):
            resolve_options(BatchOptions(), batch_size=0)

    @pytest.mark.parametrize("override", ["batchsize", "continueOnError", "retries"])
    def test_unknown_override_rejected(self, override):
        """Test a misspelt option name is an error, not a silent default"""
        with pytest.raises(ValidationError, match=override):
            resolve_options(BatchOptions(), **{override: 3})

    def test_unknown_retry_field_rejected(self):
        """Test retry settings reject unknown names too"""
        with pytest.raises(ValidationError, match="attempts"):
            BatchOptions(retry={"attempts": 3})


class TestFromEnv:
    """Test loading options from the environment"""

    def test_defaults_without_env(self, clean_env):
        """Test an empty environment gives the defaults"""
        assert BatchOptions.from_env() == BatchOptions()

    def test_reads_env(self, clean_env):
        """Test every BATCH_ variable is picked up"""
        clean_env.setenv("BATCH_SIZE", "5")
        clean_env.setenv("BATCH_DELAY_BETWEEN_BATCHES", "0.25")
        clean_env.setenv("BATCH_CONTINUE_ON_ERROR", "true")
        clean_env.setenv("BATCH_FLATTEN", "TRUE")
        clean_env.setenv("BATCH_TIMEOUT", "2.5")
        clean_env.setenv("BATCH_RETRY_MAX_ATTEMPTS", "3")
        clean_env.setenv("BATCH_RETRY_BACKOFF", "Exponential")
        clean_env.setenv("BATCH_RETRY_INITIAL_DELAY", "0.05")
        clean_env.setenv("BATCH_RETRY_MAX_DELAY", "1")

        options = BatchOptions.from_env()

        assert options.batch_size == 5
        assert options.delay_between_batches == 0.25
        assert options.continue_on_error is True
        assert options.flatten is True
        assert options.timeout == 2.5
        assert options.retry == RetryPolicy(
            max_attempts=3, backoff="exponential", initial_delay=0.05, max_delay=1.0
        )

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        """Test a .env file in the working directory is loaded"""
        (tmp_path / ".env").write_text("BATCH_SIZE=7\n")

        assert BatchOptions.from_env().batch_size == 7

    def test_custom_prefix_and_overrides(self, clean_env):
        """Test another prefix can be used and overrides win"""
        clean_env.setenv("UPLOAD_SIZE", "8")
        clean_env.setenv("UPLOAD_FLATTEN", "true")

        options = BatchOptions.from_env(prefix="UPLOAD_", flatten=False)

        assert options.batch_size == 8
        assert options.flatten is False

    def test_invalid_env_batch_size(self, clean_env):
        """Test a zero batch size from the environment is rejected"""
        clean_env.setenv("BATCH_SIZE", "0")

        with pytest.raises(InvalidConfigurationError):
            BatchOptions.from_env()

    @pytest.mark.parametrize("raw", ["2.5", "abc", "three"])
    def test_malformed_env_batch_size(self, clean_env, raw):
        """Test a non-integer batch size from the environment is a configuration error"""
        clean_env.setenv("BATCH_SIZE", raw)

        with pytest.raises(InvalidConfigurationError) as exc_info:
            BatchOptions.from_env()

        assert exc_info.value.field == "batch_size"
        assert exc_info.value.value == raw
