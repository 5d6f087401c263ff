from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    app_name: str = 'Academy Dashboard'
    app_env: str = 'local'
    app_timezone: str = 'Asia/Kolkata'
    database_url: str = 'sqlite:///./academy.db'
    db_slow_query_ms: int = 100
    metrics_slow_ms: int = 200
    session_storage_path: str = './.academy_session.json'
    session_token_marker: str = 'local-session'
    auth_verify_password: bool = False
    default_page_size: int = 20
    lookup_table_limit: int = 5000
    unknown_label: str = 'Unknown'
    legacy_id_alias: str = '_id'
    attendance_high_threshold: int = 80
    attendance_low_threshold: int = 60
    health_base_url: str = 'http://127.0.0.1:8000'


settings = Settings()
