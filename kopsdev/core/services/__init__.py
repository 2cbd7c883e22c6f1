"""Service layer — platform detection, execution, install orchestration."""
