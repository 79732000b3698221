# File: scribe/features/correction/data/repository.py
from typing import List

from sqlalchemy.exc import IntegrityError

from scribe.core.database.connection import SessionLocal
from .sql_models import DictionaryEntryModel
from ..domain.interfaces import IDictionaryRepository
from ..domain.models import DictionaryEntry


class SqlDictionaryRepo(IDictionaryRepository):

    def list_entries(self) -> List[DictionaryEntry]:
        with SessionLocal() as db:
            rows = (
                db.query(DictionaryEntryModel)
                .order_by(DictionaryEntryModel.created_at, DictionaryEntryModel.wrong_text)
                .all()
            )
            return [DictionaryEntry(wrong_text=r.wrong_text, correct_text=r.correct_text, id=r.id) for r in rows]

    def add_entry(self, wrong_text: str, correct_text: str) -> bool:
        with SessionLocal() as db:
            exists = db.query(DictionaryEntryModel).filter(DictionaryEntryModel.wrong_text == wrong_text).first()
            if exists:
                return False
            db.add(DictionaryEntryModel(wrong_text=wrong_text, correct_text=correct_text))
            try:
                db.commit()
            except IntegrityError:
                # Lost a race with a concurrent insert of the same wrong_text
                db.rollback()
                return False
            return True

    def remove_entry(self, wrong_text: str) -> bool:
        with SessionLocal() as db:
            row = db.query(DictionaryEntryModel).filter(DictionaryEntryModel.wrong_text == wrong_text).first()
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def boost_terms(self) -> List[str]:
        return [e.correct_text for e in self.list_entries() if e.correct_text]
