from django.apps import AppConfig


class LedgerAppConfig(AppConfig):
    """
    Holds the process-wide ``TransactionMediator``.

    Nothing connects on ``ready()``; ``ledger.bootstrap.bootstrap`` installs
    the mediator from the serving entry points (``backend.wsgi`` and
    ``manage.py serve``) so that tests and other management commands never
    touch the network.
    """

    name = "ledger"
    verbose_name = "Ledger session"

    mediator = None

    def install(self, mediator) -> None:
        self.mediator = mediator

    def uninstall(self) -> None:
        mediator, self.mediator = self.mediator, None
        if mediator is not None and hasattr(mediator.session, "close"):
            mediator.session.close()
