from ocrmerge.config.settings import Settings
from ocrmerge.logging.logger import Log
from ocrmerge.worker.batch_runner import build_batch_runner

BANNER = "OCR and Merge Utility"


def main() -> None:
    """Entry point: banner -> settings -> wire dependencies -> one batch run."""
    print(BANNER)
    settings = Settings()
    Log.configure(settings.log_level)

    runner = build_batch_runner(settings)
    runner.run()


if __name__ == "__main__":
    main()
