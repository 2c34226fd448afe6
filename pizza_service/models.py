from datetime import datetime, timezone

from .extensions import db
from .enums import Role


def _utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    email = db.Column(db.String, unique=True, nullable=False)
    password_hash = db.Column(db.String, nullable=False)

    roles = db.relationship(
        "UserRole", back_populates="user", cascade="all, delete-orphan"
    )
    tokens = db.relationship(
        "AuthToken", back_populates="user", cascade="all, delete-orphan"
    )

    def has_role(self, role):
        return any(r.role == str(role) for r in self.roles)

    @property
    def is_admin(self):
        return self.has_role(Role.ADMIN)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": [role.to_dict() for role in self.roles],
        }


class UserRole(db.Model):
    __tablename__ = "user_roles"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    role = db.Column(db.String, nullable=False)
    # Franchise id for franchisee roles
    object_id = db.Column(db.Integer, nullable=True)

    user = db.relationship("User", back_populates="roles")

    def to_dict(self):
        data = {"role": self.role}
        if self.object_id is not None:
            data["objectId"] = self.object_id
        return data


class AuthToken(db.Model):
    __tablename__ = "auth_tokens"
    token = db.Column(db.String, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    user = db.relationship("User", back_populates="tokens")


class Franchise(db.Model):
    __tablename__ = "franchises"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, unique=True, nullable=False)

    stores = db.relationship(
        "Store", back_populates="franchise", cascade="all, delete-orphan"
    )

    def admins(self):
        return (
            User.query.join(UserRole)
            .filter(UserRole.role == Role.FRANCHISEE.value, UserRole.object_id == self.id)
            .order_by(User.id.asc())
            .all()
        )

    def to_dict(self, include_admins=False):
        data = {
            "id": self.id,
            "name": self.name,
            "stores": [store.to_dict() for store in self.stores],
        }
        if include_admins:
            data["admins"] = [
                {"id": user.id, "name": user.name, "email": user.email}
                for user in self.admins()
            ]
        return data


class Store(db.Model):
    __tablename__ = "stores"
    id = db.Column(db.Integer, primary_key=True)
    franchise_id = db.Column(db.Integer, db.ForeignKey("franchises.id"), nullable=False)
    name = db.Column(db.String, nullable=False)

    franchise = db.relationship("Franchise", back_populates="stores")

    def to_dict(self):
        return {"id": self.id, "franchiseId": self.franchise_id, "name": self.name}


class MenuItem(db.Model):
    __tablename__ = "menu"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String, nullable=False)
    description = db.Column(db.String, nullable=False, default="")
    image = db.Column(db.String, nullable=False, default="")
    price = db.Column(db.Float, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "price": self.price,
        }


class DinerOrder(db.Model):
    __tablename__ = "diner_orders"
    id = db.Column(db.Integer, primary_key=True)
    diner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    franchise_id = db.Column(db.Integer, db.ForeignKey("franchises.id"), nullable=False)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False)
    date = db.Column(db.DateTime(timezone=True), default=_utcnow)

    items = db.relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan"
    )

    @property
    def total(self):
        return sum(item.price for item in self.items)

    def to_dict(self):
        return {
            "id": self.id,
            "franchiseId": self.franchise_id,
            "storeId": self.store_id,
            "date": self.date.isoformat() if self.date else None,
            "items": [item.to_dict() for item in self.items],
        }


class OrderItem(db.Model):
    __tablename__ = "order_items"
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("diner_orders.id"), nullable=False)
    menu_id = db.Column(db.Integer, db.ForeignKey("menu.id"), nullable=False)
    description = db.Column(db.String, nullable=False, default="")
    price = db.Column(db.Float, nullable=False)

    order = db.relationship("DinerOrder", back_populates="items")

    def to_dict(self):
        return {
            "id": self.id,
            "menuId": self.menu_id,
            "description": self.description,
            "price": self.price,
        }
