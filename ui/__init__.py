# ui - PyQt5 desktop shell (main window, table models, dialogs)
