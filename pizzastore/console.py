"""
Line based terminal front end.

Only reads input, builds request objects, calls the services and prints the
outcome. Every business rule lives in pizzastore.services.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from .auth_utils import AuthorizationPolicy, Capability, authenticate
from .errors import InvalidInput, PizzaStoreError
from .models.order import FoodOrder, OrderStatus
from .schemas.item import ItemCreate, ItemUpdate
from .schemas.order import OrderCreate, OrderLine
from .schemas.user import ProfileField, UserCreate, UserFieldUpdate
from .services import MenuService, OrderService, StoreService, UserService
from .store_gateway import RecordStore

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {
    "1": ProfileField.favorite_items,
    "2": ProfileField.phone_num,
    "3": ProfileField.role,
}

# The manager screen lists role before phone number
MANAGER_FIELDS = {
    "1": ProfileField.favorite_items,
    "2": ProfileField.role,
    "3": ProfileField.phone_num,
}


def format_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "invalid input")


class Console:

    def __init__(self, store: RecordStore, policy: Optional[AuthorizationPolicy] = None,
                 input_func: Callable[[str], str] = input,
                 output: Callable[[str], None] = print):
        self.policy = policy or AuthorizationPolicy.from_settings(store)
        self.users = UserService(store, self.policy)
        self.menu = MenuService(store, self.policy)
        self.orders = OrderService(store, self.policy)
        self.stores = StoreService(store)
        self.store = store
        self._input = input_func
        self._output = output

    # ============ I/O helpers ============

    def say(self, message: str = "") -> None:
        self._output(message)

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def ask_int(self, prompt: str) -> int:
        raw = self.ask(prompt)
        try:
            return int(raw)
        except ValueError:
            raise InvalidInput(f"'{raw}' is not a number")

    def read_choice(self) -> int:
        """Keep asking until an integer is typed"""
        while True:
            raw = self.ask("Please make your choice: ")
            try:
                return int(raw)
            except ValueError:
                self.say("Your input is invalid!")

    def print_rows(self, headers: Sequence[str], rows: List[Sequence[object]],
                   empty_message: str) -> None:
        if not rows:
            self.say(empty_message)
            return
        self.say("\t".join(headers))
        for row in rows:
            self.say("\t".join("" if value is None else str(value) for value in row))

    def print_orders(self, orders: List[FoodOrder], empty_message: str) -> None:
        self.print_rows(
            ["orderID", "login", "storeID", "totalPrice", "orderTimestamp", "orderStatus"],
            [[o.order_id, o.login, o.store_id, f"{o.total_price:.2f}",
              o.order_timestamp.strftime("%Y-%m-%d %H:%M:%S"), o.order_status.value]
             for o in orders],
            empty_message,
        )

    def attempt(self, action: Callable[[], None]) -> None:
        """Run one menu action; errors are printed and control comes back here"""
        try:
            action()
        except PizzaStoreError as e:
            self.say(f"Error: {e.message}")
        except ValidationError as e:
            self.say(f"Invalid input: {format_validation_error(e)}")

    # ============ Main loop ============

    def run(self) -> None:
        self.say("\n" + "*" * 55)
        self.say("              Pizza Store User Interface")
        self.say("*" * 55 + "\n")
        try:
            while True:
                self.say("MAIN MENU")
                self.say("---------")
                self.say("1. Create user")
                self.say("2. Log in")
                self.say("9. < EXIT\n")
                choice = self.read_choice()
                if choice == 1:
                    self.attempt(self.create_user)
                elif choice == 2:
                    login = self.log_in()
                    if login is not None:
                        self.user_menu(login)
                elif choice == 9:
                    return
                else:
                    self.say("Unrecognized choice!")
        except EOFError:
            self.say()

    def create_user(self) -> None:
        request = UserCreate(
            login=self.ask("Enter user login: "),
            password=self.ask("Enter user password: "),
            role=self.ask("What type of user are you? (customer, manager, driver): "),
            phone_num=self.ask("Enter user phone: "),
        )
        self.users.register(request)
        self.say("User successfully created!\n")

    def log_in(self) -> Optional[str]:
        login = self.ask("Enter your login: ")
        password = self.ask("Enter your password: ")
        try:
            login = authenticate(self.store, login, password)
        except PizzaStoreError as e:
            self.say(e.message)
            return None
        self.say("Login successful.\n")
        return login

    def user_menu(self, login: str) -> None:
        actions: Dict[int, Callable[[str], None]] = {
            1: self.view_profile,
            2: self.update_profile,
            3: self.view_menu,
            4: self.place_order,
            5: self.view_all_orders,
            6: self.view_recent_orders,
            7: self.view_order_info,
            8: self.view_stores,
            9: self.update_order_status,
            10: self.update_menu,
            11: self.update_user,
        }
        while True:
            self.say("MAIN MENU")
            self.say("---------")
            self.say("1. View Profile")
            self.say("2. Update Profile")
            self.say("3. View Menu")
            self.say("4. Place Order")
            self.say("5. View Full Order ID History")
            self.say(f"6. View Past {self.orders.recent_limit} Order IDs")
            self.say("7. View Order Information")
            self.say("8. View Stores")
            self.say("9. Update Order Status")
            self.say("10. Update Menu")
            self.say("11. Update User")
            self.say(".........................")
            self.say("20. Log out\n")
            choice = self.read_choice()
            if choice == 20:
                return
            action = actions.get(choice)
            if action is None:
                self.say("Unrecognized choice!")
                continue
            self.attempt(lambda: action(login))

    # ============ Customer actions ============

    def view_profile(self, login: str) -> None:
        user = self.users.get_profile(login)
        self.print_rows(
            ["login", "role", "favoriteItems", "phoneNum"],
            [[user.login, user.role.value, user.favorite_items, user.phone_num]],
            "No profile found for the given login.",
        )

    def update_profile(self, login: str) -> None:
        self.say("What would you like to update?")
        self.say("1. Favorite Items")
        self.say("2. Phone Number")
        self.say("3. Role")
        field = PROFILE_FIELDS.get(self.ask("Enter your choice: "))
        if field is None:
            self.say("Invalid choice. Please try again.")
            return
        value = self.ask("Enter new value: ")
        self.users.update_profile(login, UserFieldUpdate(field=field, value=value))
        self.say("Profile updated successfully.\n")

    def view_menu(self, login: str) -> None:
        store_id = self.ask_int("Enter the store ID: ")
        type_of_item = self.ask("Filter by type of item (Enter for all): ")
        max_price = self.ask("Maximum price (Enter for any): ")
        sort = self.ask("Sort by price? (asc/desc, Enter for none): ").lower() or None
        items = self.orders.list_menu(store_id, type_of_item=type_of_item,
                                      max_price=max_price, sort_by_price=sort)
        self.print_rows(
            ["itemName", "typeOfItem", "price", "description"],
            [[i.item_name, i.type_of_item, f"{i.price:.2f}", i.description] for i in items],
            "No menu items match.",
        )

    def place_order(self, login: str) -> None:
        store_id = self.ask_int("Enter the store ID: ")
        lines = []
        while True:
            item_name = self.ask("Enter the item you want to order (Enter to finish): ")
            if not item_name:
                break
            raw_quantity = self.ask("Quantity (Enter for 1): ")
            if raw_quantity and not raw_quantity.isdigit():
                raise InvalidInput(f"'{raw_quantity}' is not a valid quantity")
            quantity = int(raw_quantity) if raw_quantity else 1
            lines.append(OrderLine(item_name=item_name, quantity=quantity))
        if not lines:
            self.say("No items entered, nothing ordered.")
            return
        order = self.orders.place_order(
            OrderCreate(login=login, store_id=store_id, items=lines))
        self.say(f"Order placed successfully! Your order ID is: {order.order_id} "
                 f"(total {order.total_price:.2f})")

    def view_all_orders(self, login: str) -> None:
        self.print_orders(self.orders.list_orders(login),
                          "No orders found for the given login.")

    def view_recent_orders(self, login: str) -> None:
        self.print_orders(self.orders.list_recent_orders(login),
                          "No recent orders found for the given login.")

    def view_order_info(self, login: str) -> None:
        order = self.orders.get_order(self.ask_int("Enter the order ID: "),
                                      actor_login=login)
        self.print_orders([order], "No order found for the given order ID.")
        self.print_rows(["itemName", "quantity"],
                        [[line.item_name, line.quantity] for line in order.items],
                        "No items recorded for this order.")

    def view_stores(self, login: str) -> None:
        self.print_rows(
            ["storeID", "address", "city", "state", "isOpen", "reviewScore"],
            [[s.store_id, s.address, s.city, s.state, s.is_open, s.review_score]
             for s in self.stores.list_stores()],
            "No stores found.",
        )

    # ============ Staff actions ============

    def update_order_status(self, login: str) -> None:
        pending = self.orders.list_all_orders(login, status=OrderStatus.pending)
        self.print_orders(pending, "No pending orders.")
        order_id = self.ask_int("Enter the order ID: ")
        self.orders.set_delivered(login, order_id)
        self.say("Order status updated successfully.\n")

    def update_menu(self, login: str) -> None:
        self.policy.require(login, Capability.edit_menu)
        self.say("1. Update existing item")
        self.say("2. Add new item")
        choice = self.ask("Choose an option (1 or 2): ")
        if choice == "1":
            item_name = self.ask("Enter the item name to update: ")
            # Fail before prompting for every field
            self.menu.get_item(item_name)
            request = ItemUpdate(
                ingredients=self.ask("Enter new ingredients (or press Enter to keep current): "),
                type_of_item=self.ask("Enter new type of item (or press Enter to keep current): "),
                price=self.ask("Enter new price (or press Enter to keep current): "),
                description=self.ask("Enter new description (or press Enter to keep current): "),
            )
            if self.menu.update_item(login, item_name, request) is None:
                self.say("No updates were made.")
            else:
                self.say("Item updated successfully.")
        elif choice == "2":
            request = ItemCreate(
                item_name=self.ask("Enter new item name: "),
                ingredients=self.ask("Enter ingredients: "),
                type_of_item=self.ask("Enter type of item: "),
                price=self.ask("Enter price: "),
                description=self.ask("Enter description: "),
            )
            self.menu.add_item(login, request)
            self.say("New item added successfully.")
        else:
            self.say("Invalid choice.")

    def update_user(self, login: str) -> None:
        self.policy.require(login, Capability.manage_users)
        self.say("Choose an operation:")
        self.say("1. Add a user")
        self.say("2. Delete a user")
        self.say("3. Update user details")
        self.say("4. List users")
        choice = self.ask("Enter your choice: ")
        if choice == "1":
            request = UserCreate(
                login=self.ask("Enter new user login: "),
                password=self.ask("Enter new user password: "),
                role=self.ask("Enter new user role (customer/manager/driver): "),
                favorite_items=self.ask("Enter new user favorite items: "),
                phone_num=self.ask("Enter new user phone number: "),
            )
            self.users.add_user(login, request)
            self.say("New user added successfully.")
        elif choice == "2":
            target = self.ask("Enter the login of the user to delete: ")
            if self.users.delete_user(login, target):
                self.say(f"User {target} deleted.")
            else:
                self.say(f"No user named {target}; nothing deleted.")
        elif choice == "3":
            target = self.ask("Enter the login of the user to update: ")
            self.say("What would you like to update?")
            self.say("1. Favorite Items")
            self.say("2. Role")
            self.say("3. Phone Number")
            field = MANAGER_FIELDS.get(self.ask("Enter your choice: "))
            if field is None:
                self.say("Invalid choice.")
                return
            value = self.ask("Enter new value: ")
            self.users.manager_update_user(login, target,
                                           UserFieldUpdate(field=field, value=value))
            self.say("User details updated.")
        elif choice == "4":
            self.print_rows(
                ["login", "role", "favoriteItems", "phoneNum"],
                [[u.login, u.role.value, u.favorite_items, u.phone_num]
                 for u in self.users.list_users(login)],
                "No users found.",
            )
        else:
            self.say("Invalid choice.")
