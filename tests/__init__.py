"""
Note-Prompt test suite.

Test Categories:
- test_templates.py: Template store, listing and substitution
- test_documents.py: Notes, front-matter, text buffers and the insertion sink
- test_pipeline.py: Generation pipeline state machine and insertion
- test_providers.py: Multi-provider client against mocked SDKs
- test_config.py: Settings persistence and defaults
- test_cli.py: Command line interface
- conftest.py: Shared fixtures and fakes

To run tests:
    pytest tests/                    # Run all tests
    pytest tests/test_pipeline.py    # Run specific test file
    pytest -v                        # Verbose output
    pytest -x                        # Stop on first failure
"""
