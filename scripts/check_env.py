#!/usr/bin/env python3
"""Validate configuration: config loading, GitHub connection, vocabulary file."""

import sys


def check_config():
    """1단계: .env 로드 및 필수값 검증."""
    print("[1/3] Loading config from .env ...")
    try:
        from botrecap.config import AppConfig

        config = AppConfig()
        print(f"  REPO          = {config.repo_full_name}")
        print(f"  API_BASE      = {config.api_base}")
        print(f"  DATA_DIR      = {config.data_dir}")
        print(f"  USE_CACHE     = {config.use_cache}")
        print("  => OK")
        return config
    except Exception as e:
        print(f"  => FAIL: {e}")
        return None


def check_github(config):
    """2단계: GitHub API 연결 + 대상 repo 접근 확인."""
    print("\n[2/3] Testing GitHub connection ...")
    try:
        from botrecap.services.factory import create_client

        with create_client(config) as client:
            (repo,) = client.fetch_all_pages(f"/repos/{config.repo_full_name}")
            print(f"  Repository: {repo.get('full_name')}")
            print(f"  Open issues: {repo.get('open_issues_count')}")
            print(f"  Rate limit remaining: {client.rate_limit_remaining}")
            print("  => OK")
            return True
    except Exception as e:
        print(f"  => FAIL: {e}")
        return False


def check_vocabulary(config):
    """3단계: 분류 어휘 파일 로드 확인."""
    print("\n[3/3] Loading classifier vocabulary ...")
    try:
        from botrecap.services.classifier import Vocabulary

        vocab = Vocabulary.from_toml(config.vocabulary_path)
        source = config.vocabulary_path if config.vocabulary_path.exists() else "built-in defaults"
        print(f"  Source: {source}")
        for category, rules in vocab.rules.items():
            print(f"  {category.value:<14} {len(rules)} rules")
        print("  => OK")
        return True
    except Exception as e:
        print(f"  => FAIL: {e}")
        return False


def main():
    config = check_config()
    if config is None:
        sys.exit(1)
    ok = check_github(config)
    ok = check_vocabulary(config) and ok
    print("\nAll checks passed." if ok else "\nSome checks failed.")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
