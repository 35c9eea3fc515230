# dailyspend/models.py
# lightweight record classes (not DB-bound ORM), built from sqlite3.Row


class User:
    def __init__(self, id, username, pin_hash=None, security_answer_hash=None, created_at=None):
        self.id = id
        self.username = username
        self.pin_hash = pin_hash
        self.security_answer_hash = security_answer_hash
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        keys = row.keys()
        return cls(
            row['id'],
            row['username'],
            pin_hash=row['pin_hash'] if 'pin_hash' in keys else None,
            security_answer_hash=row['security_answer_hash'] if 'security_answer_hash' in keys else None,
            created_at=row['created_at'] if 'created_at' in keys else None,
        )

    @property
    def has_security_answer(self):
        return bool(self.security_answer_hash)

    def to_dict(self):
        # hashes never leave the server
        return {"id": self.id, "username": self.username, "created_at": self.created_at}


class Category:
    def __init__(self, id, user_id, name, type, parent_id=None):
        self.id = id
        self.user_id = user_id
        self.name = name
        self.type = type
        self.parent_id = parent_id

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        return cls(row['id'], row['user_id'], row['name'], row['type'], row['parent_id'])

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "type": self.type,
            "parent_id": self.parent_id,
        }


class Expense:
    def __init__(self, id, user_id, amount, category_id, description=None, timestamp=None,
                 category_name=None, category_type=None):
        self.id = id
        self.user_id = user_id
        self.amount = amount
        self.category_id = category_id
        self.description = description
        self.timestamp = timestamp
        self.category_name = category_name
        self.category_type = category_type

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        keys = row.keys()
        return cls(
            row['id'], row['user_id'], row['amount'], row['category_id'],
            description=row['description'],
            timestamp=row['timestamp'],
            category_name=row['category_name'] if 'category_name' in keys else None,
            category_type=row['category_type'] if 'category_type' in keys else None,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "category_id": self.category_id,
            "description": self.description,
            "timestamp": self.timestamp,
            "category_name": self.category_name,
            "category_type": self.category_type,
        }


class DailyLimit:
    def __init__(self, id, user_id, limit_amount, date):
        self.id = id
        self.user_id = user_id
        self.limit_amount = limit_amount
        self.date = date

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        return cls(row['id'], row['user_id'], row['limit_amount'], row['date'])

    def to_dict(self):
        return {"id": self.id, "user_id": self.user_id, "limit_amount": self.limit_amount, "date": self.date}


class Session:
    def __init__(self, session_id, user_id, username, created_at=None):
        self.session_id = session_id
        self.user_id = user_id
        self.username = username
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        return cls(row['session_id'], row['user_id'], row['username'], row['created_at'])
