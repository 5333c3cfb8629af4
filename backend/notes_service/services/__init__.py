# Services package init
"""
Notes Service — Services Layer

    - NoteService: CRUD over the notes table, translating missing rows and
      driver errors into application exceptions.
"""
