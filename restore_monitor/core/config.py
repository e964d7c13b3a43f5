from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "restore-monitor"
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"

    max_workers: int = 4
    max_finished_jobs: int = 200
    recent_limit: int = 20

    restore_target_dir: str = "/data/restored"
    gbak_path: str = "gbak"
    gfix_path: str = "gfix"
    firebird_user: str = "SYSDBA"
    firebird_password: str = "masterkey"

    backup_extensions: list[str] = [".fbk", ".gbk"]
    min_backup_size: int = 1024

settings = Settings()
