"""
End-to-end tests for the tokcount CLI.

These tests verify complete workflows from CLI input to final output.

All tests in this directory are marked with @pytest.mark.e2e and run
complete CLI invocations through the Click test runner.
"""
